"""Secret reference resolution.

The Duo secret key can be given as a literal or as a reference into a cloud
secret manager:

  - "aws-secret://secret-name"         -> AWS Secrets Manager
  - "aws-secret://secret-name#key"     -> AWS Secrets Manager (JSON key)
  - "gcp-secret://projects/P/secrets/N/versions/V"
  - "gcp-secret://name"                -> latest version in $GCP_PROJECT_ID
"""

from __future__ import annotations

import json
import logging
import os

from duo_sync.errors import ConfigError

logger = logging.getLogger("duo_sync.secrets")

_AWS_PREFIX = "aws-secret://"
_GCP_PREFIX = "gcp-secret://"


def resolve_secret(value: str) -> str:
    """Return the plaintext for ``value``; anything without a known prefix is literal."""
    if value.startswith(_AWS_PREFIX):
        return _from_aws(value[len(_AWS_PREFIX):])
    if value.startswith(_GCP_PREFIX):
        return _from_gcp(value[len(_GCP_PREFIX):])
    return value


def _from_aws(ref: str) -> str:
    import boto3

    name, _, json_key = ref.partition("#")
    region = os.environ.get("AWS_REGION", "us-east-1")
    client = boto3.client("secretsmanager", region_name=region)
    logger.info("Resolving secret from AWS Secrets Manager", extra={"operation": "resolve secret"})

    secret_string = client.get_secret_value(SecretId=name)["SecretString"]
    if not json_key:
        return secret_string

    data = json.loads(secret_string)
    if json_key not in data:
        raise ConfigError(f"key {json_key!r} not found in AWS secret {name!r}")
    return str(data[json_key])


def _from_gcp(ref: str) -> str:
    if ref.startswith("projects/"):
        name = ref
    else:
        project = os.environ.get("GCP_PROJECT_ID", "")
        if not project:
            raise ConfigError(
                f"GCP_PROJECT_ID is required to resolve gcp-secret://{ref}"
            )
        name = f"projects/{project}/secrets/{ref}/versions/latest"

    from google.cloud import secretmanager

    logger.info("Resolving secret from GCP Secret Manager", extra={"operation": "resolve secret"})
    client = secretmanager.SecretManagerServiceClient()
    response = client.access_secret_version(request={"name": name})
    return response.payload.data.decode("UTF-8")
