from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol

from ..config import StackMetaSettings
from ..constants import DEFAULT_TOOLKIT_STACK_NAME
from ..errors import ToolkitError
from ..logging import StructuredLogger

BUCKET_NAME_OUTPUT = "BucketName"
BUCKET_DOMAIN_NAME_OUTPUT = "BucketDomainName"

# Stacks in these states hold no usable outputs.
_ABSENT_STACK_STATUSES = frozenset({"DELETE_COMPLETE", "REVIEW_IN_PROGRESS"})


def _is_failed_status(status: str) -> bool:
    return status.endswith("_FAILED") or status == "ROLLBACK_COMPLETE"


class ToolkitSdk(Protocol):
    """Client factory shaped like a boto3 session scoped to one environment."""

    def cloudformation(self) -> Any: ...

    def ecr(self) -> Any: ...


@dataclass(frozen=True)
class EcrRepositoryInfo:
    repository_uri: str


def _error_code(exc: Exception) -> Optional[str]:
    response = getattr(exc, "response", None)
    if isinstance(response, Mapping):
        return (response.get("Error") or {}).get("Code")
    return getattr(exc, "code", None)


def stack_outputs(stack: Mapping[str, Any]) -> Dict[str, str]:
    """Return the stack outputs as a map."""
    outputs: Dict[str, str] = {}
    for output in stack.get("Outputs") or []:
        key = output.get("OutputKey")
        if key:
            outputs[key] = output.get("OutputValue") or ""
    return outputs


def describe_stack(cfn: Any, stack_name: str) -> Optional[Mapping[str, Any]]:
    """Describe a stack, or None if it does not (or no longer) exist."""
    try:
        response = cfn.describe_stacks(StackName=stack_name)
    except Exception as exc:
        if _error_code(exc) == "ValidationError" and "does not exist" in str(exc):
            return None
        raise
    stacks = response.get("Stacks") or []
    if not stacks:
        return None
    stack = stacks[0]
    status = stack.get("StackStatus") or ""
    if status in _ABSENT_STACK_STATUSES:
        return None
    if _is_failed_status(status):
        raise ToolkitError(
            f"The CDK toolkit stack ({stack_name}) is in a failed state ({status}). "
            "Delete it and run 'cdk bootstrap' again."
        )
    return stack


class ToolkitInfo:
    """Outputs of the bootstrap toolkit stack in one environment."""

    def __init__(
        self,
        *,
        sdk: ToolkitSdk,
        environment_name: str,
        bucket_name: str,
        bucket_endpoint: str,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self.sdk = sdk
        self.environment_name = environment_name
        self._bucket_name = bucket_name
        self._bucket_endpoint = bucket_endpoint
        self.logger = logger or StructuredLogger("toolkit")

    @staticmethod
    def determine_name(override_name: Optional[str] = None) -> str:
        return override_name or DEFAULT_TOOLKIT_STACK_NAME

    @classmethod
    def lookup(
        cls,
        environment_name: str,
        sdk: ToolkitSdk,
        stack_name: Optional[str] = None,
        logger: Optional[StructuredLogger] = None,
        settings: Optional[StackMetaSettings] = None,
    ) -> Optional["ToolkitInfo"]:
        logger = logger or StructuredLogger("toolkit")
        if stack_name is None:
            stack_name = (settings or StackMetaSettings()).toolkit_stack_name
        name = cls.determine_name(stack_name)
        stack = describe_stack(sdk.cloudformation(), name)
        if stack is None:
            logger.debug(
                "toolkit_stack_missing",
                environment=environment_name,
                stack_name=name,
                hint=f'cdk bootstrap "{environment_name}"',
            )
            return None

        outputs = stack_outputs(stack)

        def require_output(output: str) -> str:
            if output not in outputs:
                raise ToolkitError(
                    f"The CDK toolkit stack ({stack.get('StackName', name)}) does not have an "
                    f"output named {output}. Use 'cdk bootstrap' to correct this."
                )
            return outputs[output]

        return cls(
            sdk=sdk,
            environment_name=environment_name,
            bucket_name=require_output(BUCKET_NAME_OUTPUT),
            bucket_endpoint=require_output(BUCKET_DOMAIN_NAME_OUTPUT),
            logger=logger,
        )

    @property
    def bucket_url(self) -> str:
        return f"https://{self._bucket_endpoint}"

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def prepare_ecr_repository(self, repository_name: str) -> EcrRepositoryInfo:
        """Return the ECR repository for `repository_name`, creating it if needed."""
        ecr = self.sdk.ecr()

        self.logger.debug("ecr_repository_check", repository=repository_name)
        try:
            response = ecr.describe_repositories(repositoryNames=[repository_name])
            repositories = response.get("repositories") or []
            existing_uri = repositories[0].get("repositoryUri") if repositories else None
            if existing_uri:
                return EcrRepositoryInfo(repository_uri=existing_uri)
        except Exception as exc:
            if _error_code(exc) != "RepositoryNotFoundException":
                raise

        # Tagged so asset repositories can be garbage collected later.
        self.logger.debug("ecr_repository_create", repository=repository_name)
        response = ecr.create_repository(
            repositoryName=repository_name,
            tags=[{"Key": "awscdk:asset", "Value": "true"}],
        )
        repository_uri = (response.get("repository") or {}).get("repositoryUri")
        if not repository_uri:
            raise ToolkitError(f"CreateRepository did not return a repository URI for {repository_name}")

        self.logger.debug("ecr_scan_on_push", repository=repository_name)
        ecr.put_image_scanning_configuration(
            repositoryName=repository_name,
            imageScanningConfiguration={"scanOnPush": True},
        )
        return EcrRepositoryInfo(repository_uri=repository_uri)
