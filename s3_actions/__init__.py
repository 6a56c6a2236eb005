"""
S3 Actions - object storage operations as named, parameter-driven actions.

This package contains the complete application:
- core: option parsing, config resolution, URL building and the actions
- infrastructure: the boto3-backed storage client
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
