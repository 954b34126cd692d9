"""Authentication configuration for ZapService."""

import logging

from zapdriver.modules.engine import flag

from .login import (
    AUTH_FORM_BASED,
    AUTH_SCRIPT_BASED,
    CSRF_AUTH_SCRIPT,
    AuthenticationSettings,
    FormBasedLogin,
    ScriptBasedLogin,
    credentials_config,
    form_login_config,
    literal_pattern,
    script_login_config,
)
from .models import AUTH_USER

logger = logging.getLogger(__name__)


class AuthMixin:
    """Configure login and the forced identity for a context."""

    def configure_authentication(
        self,
        context_id: str,
        login_url: str,
        username_field: str,
        password_field: str,
        username: str,
        password: str,
        extra_login_query: str = "",
        logged_in_indicator: str | None = None,
        logged_out_indicator: str | None = None,
        csrf_token_field: str | None = None,
    ) -> str:
        """Configure authentication; a CSRF token field selects script-based login.

        Returns the id of the forced user.
        """
        settings = AuthenticationSettings(
            login_url=login_url,
            username_field=username_field,
            password_field=password_field,
            username=username,
            password=password,
            extra_login_query=extra_login_query,
            logged_in_indicator=logged_in_indicator,
            logged_out_indicator=logged_out_indicator,
            csrf_token_field=csrf_token_field,
        )
        return self.apply_authentication(context_id, settings)

    def apply_authentication(self, context_id: str, settings: AuthenticationSettings) -> str:
        logger.info(
            "Configuring ZAP authentication for user '%s' and login URL '%s'",
            settings.username,
            settings.login_url,
        )
        match settings.login_method():
            case FormBasedLogin() as method:
                self.zap.authentication.set_authentication_method(
                    contextid=context_id,
                    authmethodname=AUTH_FORM_BASED,
                    authmethodconfigparams=form_login_config(method),
                )
            case ScriptBasedLogin() as method:
                config = script_login_config(method)
                self.zap.acsrf.add_option_token(string=method.csrf_token_field)
                self._load_login_script()
                self.zap.authentication.set_authentication_method(
                    contextid=context_id,
                    authmethodname=AUTH_SCRIPT_BASED,
                    authmethodconfigparams=config,
                )

        if settings.logged_in_indicator:
            self.zap.authentication.set_logged_in_indicator(
                contextid=context_id,
                loggedinindicatorregex=literal_pattern(settings.logged_in_indicator),
            )
        if settings.logged_out_indicator:
            self.zap.authentication.set_logged_out_indicator(
                contextid=context_id,
                loggedoutindicatorregex=literal_pattern(settings.logged_out_indicator),
            )

        credentials = credentials_config(settings.username, settings.password)
        user_id = str(self.zap.users.new_user(contextid=context_id, name=AUTH_USER))
        self.zap.users.set_authentication_credentials(
            contextid=context_id, userid=user_id, authcredentialsconfigparams=credentials
        )
        self.zap.users.set_user_enabled(contextid=context_id, userid=user_id, enabled=flag(True))
        self.zap.forcedUser.set_forced_user(contextid=context_id, userid=user_id)
        self.zap.forcedUser.set_forced_user_mode_enabled(boolean=flag(True))
        return user_id

    def _load_login_script(self) -> None:
        scripts = self.zap.script.list_scripts
        if not isinstance(scripts, list):
            scripts = []
        if any(isinstance(s, dict) and s.get("name") == CSRF_AUTH_SCRIPT for s in scripts):
            logger.debug("Login script '%s' already loaded", CSRF_AUTH_SCRIPT)
            return
        self.zap.script.load(
            scriptname=CSRF_AUTH_SCRIPT,
            scripttype="authentication",
            scriptengine=self.settings.auth_script_engine,
            filename=self.settings.auth_script_file,
            scriptdescription="csrfloginscript",
        )
