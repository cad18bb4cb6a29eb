import typing

import click


class SnapPwdException(click.ClickException):
    pass


class InvalidEncoding(SnapPwdException):
    pass


class InvalidKey(SnapPwdException):
    pass


class MalformedEnvelope(SnapPwdException):
    pass


class AuthenticationFailed(SnapPwdException):
    pass


class InvalidLink(SnapPwdException):
    pass


def format_ttl(ttl_seconds: int) -> str:
    """
    Describe a remaining time to live.

    The store reports -1 for secrets that never expire and -2 for secrets that
    have expired or never existed.
    """
    if ttl_seconds == -1:
        return "Never"
    if ttl_seconds == -2:
        return "Expired or Key Missing"

    days, rest = divmod(ttl_seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)

    parts: typing.List[str] = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return ' '.join(parts)
