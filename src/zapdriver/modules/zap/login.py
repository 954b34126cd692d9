"""Login strategies and their engine configuration templates."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote_plus

AUTH_FORM_BASED = "formBasedAuthentication"
AUTH_SCRIPT_BASED = "scriptBasedAuthentication"
CSRF_AUTH_SCRIPT = "csrfAuthScript"


class LoginTemplateError(ValueError):
    """The login request template could not be encoded."""


@dataclass(frozen=True)
class FormBasedLogin:
    """Plain form POST login."""

    login_url: str
    username_field: str
    password_field: str
    extra_login_query: str = ""


@dataclass(frozen=True)
class ScriptBasedLogin:
    """Login through the CSRF-aware authentication script."""

    login_url: str
    username_field: str
    password_field: str
    csrf_token_field: str
    extra_login_query: str = ""


LoginMethod = FormBasedLogin | ScriptBasedLogin


@dataclass
class AuthenticationSettings:
    """Credentials and login form description for one target."""

    login_url: str
    username_field: str
    password_field: str
    username: str
    password: str
    extra_login_query: str = ""
    logged_in_indicator: str | None = None
    logged_out_indicator: str | None = None
    csrf_token_field: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthenticationSettings":
        return cls(
            login_url=data["login_url"],
            username_field=data["username_field"],
            password_field=data["password_field"],
            username=data["username"],
            password=data["password"],
            extra_login_query=data.get("extra_login_query") or "",
            logged_in_indicator=data.get("logged_in_indicator"),
            logged_out_indicator=data.get("logged_out_indicator"),
            csrf_token_field=data.get("csrf_token_field"),
        )

    def login_method(self) -> LoginMethod:
        """Pick the login strategy; a CSRF token field selects the script."""
        if self.csrf_token_field:
            return ScriptBasedLogin(
                login_url=self.login_url,
                username_field=self.username_field,
                password_field=self.password_field,
                csrf_token_field=self.csrf_token_field,
                extra_login_query=self.extra_login_query,
            )
        return FormBasedLogin(
            login_url=self.login_url,
            username_field=self.username_field,
            password_field=self.password_field,
            extra_login_query=self.extra_login_query,
        )


def _encode(value: str) -> str:
    try:
        return quote_plus(value, encoding="utf-8", errors="strict")
    except UnicodeEncodeError as exc:
        raise LoginTemplateError(f"Cannot encode login template value: {exc}") from exc


def form_login_config(method: FormBasedLogin) -> str:
    """Build the ``formBasedAuthentication`` config parameters."""
    request_data = (
        f"{method.username_field}={{%username%}}&{method.password_field}={{%password%}}"
        f"{method.extra_login_query}"
    )
    return f"loginUrl={_encode(method.login_url)}&loginRequestData={_encode(request_data)}"


def script_login_config(method: ScriptBasedLogin, script_name: str = CSRF_AUTH_SCRIPT) -> str:
    """Build the ``scriptBasedAuthentication`` config parameters."""
    post_data = (
        f"{method.username_field}={{%username%}}&{method.password_field}={{%password%}}"
        f"&{method.csrf_token_field}={{%user_token%}}"
    )
    return (
        f"scriptName={script_name}&LoginURL={method.login_url}"
        f"&CSRFField={method.csrf_token_field}&POSTData={_encode(post_data)}"
        f"{method.extra_login_query}"
    )


def credentials_config(username: str, password: str) -> str:
    """Build the user credential parameters bound to the forced identity."""
    return f"username={_encode(username)}&password={_encode(password)}"


def literal_pattern(text: str) -> str:
    """Quote text so the engine's Java regex matches it literally."""
    return f"\\Q{text}\\E"
