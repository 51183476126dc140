"""Configuration for the fxa-oauth CLI.

Values are loaded from environment variables (and a .env file, loaded at
package import) according to ConfigSchema. Command-line flags are applied
on top with with_overrides().
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from fxa_oauth.core.auth.constants import Environments
from fxa_oauth.core.config.schema import ConfigSchema
from fxa_oauth.core.config.validation import ConfigError, load_env_var


@dataclass(frozen=True)
class Config:
    """Resolved configuration.

    ``oauth_url`` and ``auth_url`` fall back to the URLs of ``env`` when
    they are not set explicitly.
    """

    env: str
    user: str | None
    password: str | None = dataclasses.field(repr=False)
    oauth_url_override: str | None
    auth_url_override: str | None
    client_id: str
    log_level: str
    debug_log: str
    request_timeout: float
    auth_deadline: float | None

    @classmethod
    def load(cls) -> Config:
        """Load configuration from the environment.

        Raises:
            ConfigError: If a variable fails validation
        """
        return cls(
            env=load_env_var(ConfigSchema.FXA_ENV),
            user=load_env_var(ConfigSchema.FXA_USER),
            password=load_env_var(ConfigSchema.FXA_PASSWORD),
            oauth_url_override=load_env_var(ConfigSchema.FXA_OAUTH_URL),
            auth_url_override=load_env_var(ConfigSchema.FXA_AUTH_URL),
            client_id=load_env_var(ConfigSchema.FXA_CLIENT_ID),
            log_level=load_env_var(ConfigSchema.LOG_LEVEL),
            debug_log=load_env_var(ConfigSchema.FXA_DEBUG_LOG),
            request_timeout=load_env_var(ConfigSchema.REQUEST_TIMEOUT),
            auth_deadline=load_env_var(ConfigSchema.FXA_AUTH_DEADLINE),
        )

    @property
    def oauth_url(self) -> str:
        return self.oauth_url_override or Environments.URLS[self.env][0]

    @property
    def auth_url(self) -> str:
        return self.auth_url_override or Environments.URLS[self.env][1]

    def with_overrides(
        self,
        env: str | None = None,
        user: str | None = None,
        oauth_url: str | None = None,
        auth_url: str | None = None,
        log_level: str | None = None,
    ) -> Config:
        """Return a copy with command-line values applied.

        Selecting an environment resets both URLs to that environment's,
        unless they are overridden in the same call.

        Raises:
            ConfigError: If env is not a known environment
        """
        changes: dict[str, object] = {}
        if env is not None:
            env = env.strip().lower()
            if env not in Environments.URLS:
                raise ConfigError(
                    "--env", env, f"must be one of: {', '.join(Environments.URLS)}"
                )
            changes.update(env=env, oauth_url_override=None, auth_url_override=None)
        if user is not None:
            changes["user"] = user
        if oauth_url is not None:
            changes["oauth_url_override"] = oauth_url
        if auth_url is not None:
            changes["auth_url_override"] = auth_url
        if log_level is not None:
            changes["log_level"] = log_level
        return dataclasses.replace(self, **changes)
