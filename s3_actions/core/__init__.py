"""
Core logic for storage actions.

Config resolution and URL building are framework-agnostic: no FastAPI,
no boto3. Only the action handlers reach into the infrastructure layer
for a client.
"""
