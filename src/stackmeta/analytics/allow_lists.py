"""Static allow-lists for construct analytics. Append-only data."""

from __future__ import annotations

ALLOWED_FQN_PREFIXES: tuple[str, ...] = (
    # scopes
    "@aws-cdk/",
    "@aws-cdk-containers/",
    "@aws-solutions-konstruk/",
    "@aws-solutions-constructs/",
    "@amzn/",
    # packages
    "aws-rfdk.",
    "aws-cdk-lib.",
    "monocdk.",
)

# Regions where the AWS::CDK::Metadata resource type is available.
CDK_METADATA_REGIONS: tuple[str, ...] = (
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
    "ap-south-1",
    "ap-northeast-1",
    "ap-northeast-2",
    "ap-northeast-3",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-east-1",
    "ca-central-1",
    "cn-north-1",
    "cn-northwest-1",
    "eu-central-1",
    "eu-north-1",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "me-south-1",
    "sa-east-1",
)
