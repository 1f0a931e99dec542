from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from ..errors import TransportError
from ..providers.subsonic import SubsonicServer
from .output import disabled, enabled, error, ok as ok_line, skipped


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[str]


def run(settings: Settings, *, check_server: bool = True) -> DoctorReport:
    checks: list[str] = []
    ok = True

    server = settings.server
    if server.url.startswith(("http://", "https://")):
        checks.append(ok_line("Server URL", server.url))
    else:
        ok = False
        checks.append(error("Server URL", f"unsupported scheme: {server.url}"))
    auth = "legacy password" if server.legacy_auth else "token"
    checks.append(ok_line("Authentication", f"{auth} as {server.username}"))
    provider = settings.provider
    checks.append(
        ok_line(
            "Provider",
            f"cache {provider.cache_ttl_seconds:g}s, rating batch {provider.rating_batch_size}, "
            f"page size {provider.page_size}",
        )
    )

    if not check_server or not ok:
        checks.append(skipped("Server"))
        return DoctorReport(ok=ok, checks=checks)

    subsonic = SubsonicServer.from_settings(settings)
    try:
        login = subsonic.login(server.username, server.password)
        if not login.ok:
            detail = "credentials rejected" if login.is_auth_error else str(login.error)
            checks.append(error("Server", detail))
            return DoctorReport(ok=False, checks=checks)
        checks.append(ok_line("Server", "ping succeeded"))
        media = subsonic.media_provider()
        if media.can_stream_with_offset():
            checks.append(enabled("Stream offset"))
        else:
            checks.append(disabled("Stream offset", "server lacks transcodeOffset"))
        try:
            genres = media.get_genres()
        except TransportError as exc:
            ok = False
            checks.append(error("Genres", str(exc)))
        else:
            checks.append(ok_line("Genres", f"{len(genres)} genre(s)"))
    finally:
        subsonic.close()
    return DoctorReport(ok=ok, checks=checks)
