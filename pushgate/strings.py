"""User-facing strings."""

from __future__ import annotations

from pushgate.keys import KeyConfig, key_hint

PUSH_POPUP_MSG = "Push"
PUSH_POPUP_PROGRESS_NONE = "preparing..."
PUSH_POPUP_STATES_ADDING = "adding objects (1/3)"
PUSH_POPUP_STATES_DELTAS = "deltas (2/3)"
PUSH_POPUP_STATES_PUSHING = "pushing (3/3)"

PUSH_FAILED_MSG = "push failed:\n{error}"

CRED_POPUP_TITLE = "Credentials"
CRED_USERNAME_LABEL = "Username"
CRED_PASSWORD_LABEL = "Password"


def close_msg(key_config: KeyConfig) -> str:
    return f"Close [{key_hint(key_config.exit_popup)}]"


def validate_msg(key_config: KeyConfig) -> str:
    return f"Validate [{key_hint(key_config.enter)}]"
