from __future__ import annotations


class AgcmdError(Exception):
    """Base for every failure the CLI turns into `Error: ...` and exit 1."""

    code = "error"

    def __init__(self, message: str, *, hint: str = ""):
        super().__init__(message)
        self.message = message
        self.hint = hint


class PreconditionError(AgcmdError):
    code = "precondition"


class LookupFailure(AgcmdError):
    code = "pane_not_found"


class SlugEmptyError(AgcmdError):
    code = "empty_slug"


class HostDeliveryFailure(AgcmdError):
    code = "host_rejected"


class ConfigParseError(AgcmdError):
    code = "config_parse"


class StartAborted(AgcmdError):
    """Operator declined a confirmation; nothing was changed."""

    code = "aborted"
