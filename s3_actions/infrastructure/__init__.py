"""
Infrastructure layer - external service integrations.

- storage: S3-compatible object storage via boto3
"""
