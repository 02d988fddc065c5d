"""Maps a provider's verify-credentials payload onto the canonical profile."""

from typing import Any, Dict, Optional

from oauthbridge.domains.oauth.types import (
    TWITTER_PROFILE_FIELD_MAP,
    AccessCredentials,
    NormalizedProfile,
    ProfileInfo,
    TokenPair,
)


class ProfileNormalizer:
    """Copies named source fields into ``NormalizedProfile``.

    The field map goes from a dotted target path (``uid``, ``info.nickname``,
    ``info.urls.website``) to a top-level source field. Source fields that are
    missing or null are left out, never filled with an empty string.
    """

    def __init__(
        self,
        field_map: Optional[Dict[str, str]] = None,
        *,
        profile_url_template: Optional[str] = None,
        profile_url_key: Optional[str] = None,
    ) -> None:
        """Configure the mapping and the provider profile URL template.

        Args:
            field_map: Target path -> source field. Defaults to Twitter's.
            profile_url_template: e.g. ``https://twitter.com/{nickname}``; ``{screen_name}``
                is accepted as the same placeholder
            profile_url_key: Key under ``info.urls`` for the synthesized URL
        """
        self.field_map = dict(field_map or TWITTER_PROFILE_FIELD_MAP)
        self.profile_url_template = profile_url_template
        self.profile_url_key = profile_url_key

    def extract_uid(self, raw: Dict[str, Any]) -> Optional[str]:
        """Unique id as a string, or None when the payload has none."""
        value = raw.get(self.field_map.get("uid", "id"))
        if value is None or value == "":
            return None
        return str(value)

    def build_info(self, raw: Dict[str, Any]) -> ProfileInfo:
        """Build the info block from the payload."""
        info: Dict[str, Any] = {}
        urls: Dict[str, str] = {}

        for target, source in self.field_map.items():
            if not target.startswith("info."):
                continue
            value = raw.get(source)
            if value is None:
                continue
            path = target[len("info.") :]
            if path.startswith("urls."):
                urls[path[len("urls.") :]] = str(value)
            else:
                info[path] = value if isinstance(value, str) else str(value)

        nickname = info.get("nickname")
        if self.profile_url_template and self.profile_url_key and nickname:
            urls[self.profile_url_key] = (
                self.profile_url_template.replace("{nickname}", str(nickname))
                .replace("{screen_name}", str(nickname))
            )

        info["urls"] = urls
        return ProfileInfo(**info)

    def normalize(
        self, raw: Dict[str, Any], access_pair: TokenPair, *, provider: str
    ) -> NormalizedProfile:
        """Produce the final profile.

        Raises:
            ValueError: If the payload has no unique id.
        """
        uid = self.extract_uid(raw)
        if uid is None:
            raise ValueError("Profile payload has no unique id")

        return NormalizedProfile(
            provider=provider,
            uid=uid,
            info=self.build_info(raw),
            credentials=AccessCredentials(
                token=access_pair.token, secret=access_pair.token_secret
            ),
            raw=raw,
        )
