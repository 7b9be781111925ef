from roost.middleware.access_log import AccessLogStage
from roost.middleware.authentication import AuthenticationStage
from roost.middleware.body_parsing import BodyParsingStage
from roost.middleware.cookies import CookieParsingStage
from roost.middleware.error_stage import ErrorStage
from roost.middleware.parameter_pollution import ParameterPollutionStage
from roost.middleware.security_headers import SecurityHeadersStage
from roost.middleware.session import SessionStage
from roost.middleware.static_files import StaticFilesStage

__all__ = [
    "AccessLogStage",
    "AuthenticationStage",
    "BodyParsingStage",
    "CookieParsingStage",
    "ErrorStage",
    "ParameterPollutionStage",
    "SecurityHeadersStage",
    "SessionStage",
    "StaticFilesStage",
]
