"""
Pydantic models for YAML smoke-suite files.
Provides schema validation with clear error messages for suite definitions.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from http_smoke.core.models import SmokeConfig


class CredentialsConfig(BaseModel):
    """Basic-auth credentials; a missing password is prompted for."""
    username: str = Field(..., min_length=1, description="Basic-auth username")
    password: Optional[str] = Field(None, description="Basic-auth password, prompted when omitted")


class SuiteConfig(BaseModel):
    """Settings applied to every request of the suite."""
    name: str = Field("smoke", description="Human-readable suite name")
    url_prefix: str = Field("", description="Prefix for relative step URLs")
    host: str = Field("", description="Host header override")
    origin: str = Field("", description="Origin header for every request")
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    proxy: str = Field("", description="Proxy URL for http and https")
    no_proxy: str = Field("", description="Comma-separated hosts that bypass the proxy")
    credentials: Optional[CredentialsConfig] = None
    csrf_token: str = Field("", description="Initial CSRF token")
    follow_redirects: bool = Field(True, description="Follow redirects")
    debug: bool = Field(False, description="Echo requests and full responses to stderr")
    timeout_s: float = Field(10.0, gt=0, le=300, description="Per-request timeout in seconds")
    after_response: Optional[str] = Field(None, description="Hook name or module:function")

    @field_validator('url_prefix')
    @classmethod
    def validate_url_prefix(cls, v):
        if v and not v.startswith(('http://', 'https://')):
            raise ValueError('url_prefix must be an HTTP/HTTPS URL')
        return v


class TcpTarget(BaseModel):
    """Target of a raw TCP connect check."""
    host: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)


class ExpectConfig(BaseModel):
    """Checks run against the response of a step, in declaration order."""
    code_ok: bool = Field(False, description="Expect a 2xx code")
    code: Optional[int] = Field(None, ge=100, le=599, description="Expect this exact code")
    no_response: bool = Field(False, description="Expect no response at all")
    body: List[str] = Field(default_factory=list, description="Patterns the body must contain")
    headers: List[str] = Field(default_factory=list, description="Patterns the headers must contain")

    @field_validator('body', 'headers', mode='before')
    @classmethod
    def single_pattern_to_list(cls, v):
        if isinstance(v, str):
            return [v]
        return v


class StepConfig(BaseModel):
    """One request (or TCP check) followed by its expectations."""
    name: Optional[str] = None
    url: Optional[str] = None
    method: Literal["GET", "POST", "OPTIONS"] = "GET"
    form: Optional[str] = Field(None, description="Form-data file sent as the POST body")
    cors: bool = False
    preflight: bool = False
    csrf_token: Optional[str] = Field(None, description="CSRF token to install before this step")
    headers: Dict[str, str] = Field(default_factory=dict, description="Headers to set before this step")
    tcp: Optional[TcpTarget] = None
    expect: ExpectConfig = Field(default_factory=ExpectConfig)

    @field_validator('method', mode='before')
    @classmethod
    def upper_method(cls, v):
        return str(v).upper() if v is not None else v

    @model_validator(mode='after')
    def validate_step_kind(self):
        if (self.url is None) == (self.tcp is None):
            raise ValueError('a step needs exactly one of "url" or "tcp"')
        if self.form and self.method != "POST":
            raise ValueError('"form" is only allowed on POST steps')
        if self.preflight and not self.cors:
            raise ValueError('"preflight" requires "cors: true"')
        if self.cors and self.method != "GET":
            raise ValueError('"cors" steps must use GET')
        return self


class SmokeSuiteConfig(BaseModel):
    """Root model of a suite file."""
    suite: SuiteConfig = Field(default_factory=SuiteConfig)
    steps: List[StepConfig] = Field(..., min_length=1)

    @model_validator(mode='after')
    def validate_cors_origin(self):
        if any(s.cors for s in self.steps) and not self.suite.origin:
            raise ValueError('suite.origin is required when a step uses "cors"')
        return self


def load_and_validate_config(config_path: str) -> SmokeSuiteConfig:
    """
    Load and validate a smoke suite from a YAML file.

    Args:
        config_path: Path to the YAML suite file

    Returns:
        Validated SmokeSuiteConfig object

    Raises:
        FileNotFoundError: If the suite file doesn't exist
        ValueError: If the YAML is malformed or the suite is invalid
    """
    import yaml

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Suite file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if not isinstance(raw_config, dict):
        raise ValueError(f"Suite file {config_path} must contain a mapping")

    try:
        return SmokeSuiteConfig(**raw_config)
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            field_path = '.'.join(str(loc) for loc in error['loc'])
            error_messages.append(f"  {field_path}: {error['msg']}")

        raise ValueError(
            f"Suite validation failed for {config_path}:\n" +
            '\n'.join(error_messages)
        ) from e


def config_to_smoke_config(config: SmokeSuiteConfig) -> SmokeConfig:
    """Convert the validated suite settings into the runtime configuration."""
    s = config.suite
    smoke = SmokeConfig(
        url_prefix=s.url_prefix,
        host_override=s.host,
        origin=s.origin,
        csrf_token=s.csrf_token,
        follow_redirects=s.follow_redirects,
        debug=s.debug,
        timeout_s=s.timeout_s,
        after_response=s.after_response,
    )
    for name, value in s.headers.items():
        smoke.set_header(name, value)
    if s.proxy:
        smoke.set_proxy(s.proxy, s.no_proxy)
    if s.credentials:
        smoke.set_credentials(s.credentials.username, s.credentials.password)
    return smoke


def resolve_form_path(form: str, suite_path: str) -> Path:
    """Form paths are relative to the suite file."""
    path = Path(form)
    if path.is_absolute():
        return path
    return Path(suite_path).resolve().parent / path
