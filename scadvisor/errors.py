"""Exception hierarchy shared by the scaling advisor components."""

from __future__ import annotations

import json


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class AdvisorError(Exception):
    """Base class of every error raised by this package."""

    message = "scaling advisor error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        text = f"{self.message}: {detail}" if detail else self.message
        super().__init__(text)


class MissingOptionError(AdvisorError, ValueError):
    """One or more required command line options are missing."""

    message = "missing option"


class InvalidOptionError(AdvisorError, ValueError):
    """An option has an invalid value."""

    message = "invalid option value"


class UnimplementedError(AdvisorError, NotImplementedError):
    """The requested feature or operation is not available."""

    message = "not implemented"


class UnexpectedTypeError(AdvisorError, TypeError):
    """An object did not have the type it was expected to have."""

    message = "unexpected type"


class InitFailedError(AdvisorError):
    """A named component failed to initialize."""

    def __init__(self, program: str, detail: str | None = None) -> None:
        self.program = program
        self.message = f"{_quote(program)} initialization failed"
        super().__init__(detail)


class StartFailedError(AdvisorError):
    """A named component failed to start."""

    def __init__(self, program: str, detail: str | None = None) -> None:
        self.program = program
        self.message = f"{_quote(program)} start failed"
        super().__init__(detail)


class NotFoundError(AdvisorError, LookupError):
    """A requested object does not exist."""

    message = "not found"


class LoadConfigTemplateError(AdvisorError):
    """A configuration template could not be loaded."""

    message = "cannot load config template"


class ExecuteConfigTemplateError(AdvisorError):
    """A configuration template could not be rendered or written."""

    message = "cannot execute config template"


class StoreNotFoundError(AdvisorError, LookupError):
    """No resource store exists for the requested kind."""

    message = "store not found"


class CreateObjectError(AdvisorError):
    """An object could not be created."""

    message = "cannot create object"


class UpdateObjectError(AdvisorError):
    """An object could not be updated."""

    message = "cannot update object"


class DeleteObjectError(AdvisorError):
    """An object could not be deleted."""

    message = "cannot delete object"


class ListObjectsError(AdvisorError):
    """Objects could not be listed."""

    message = "cannot list objects"


class GenerateAdviceError(AdvisorError):
    """Scaling advice could not be generated for a request."""

    message = "failed to generate scaling advice"

    def __init__(
        self,
        detail: str | None = None,
        *,
        request_id: str = "",
        correlation_id: str = "",
    ) -> None:
        self.request_id = request_id
        self.correlation_id = correlation_id
        super().__init__(detail)


class MissingRequiredLabelError(AdvisorError, LookupError):
    """An object lacks a label that is required."""

    message = "missing required label"


class UnsupportedCloudProviderError(AdvisorError, ValueError):
    """The named cloud provider is not supported."""

    message = "unsupported cloud provider"


class UnsupportedNodeScoringStrategyError(AdvisorError, ValueError):
    """The named node scoring strategy is not supported."""

    message = "unsupported node scoring strategy"


class PatchError(AdvisorError, ValueError):
    """A patch could not be applied to an object."""

    message = "cannot patch object"


def as_generate_error(
    request_id: str, correlation_id: str, err: BaseException | None
) -> GenerateAdviceError | None:
    """Wrap ``err`` as a GenerateAdviceError naming the request; None stays None."""
    if err is None:
        return None
    if isinstance(err, GenerateAdviceError):
        return err
    wrapped = GenerateAdviceError(
        f"could not process request with ID {_quote(request_id)}, "
        f"CorrelationID {_quote(correlation_id)}: {err}",
        request_id=request_id,
        correlation_id=correlation_id,
    )
    wrapped.__cause__ = err
    return wrapped