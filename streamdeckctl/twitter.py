"""Fetches a tweet and stores its author's picture and first photo."""

from __future__ import annotations

import json
import posixpath
import re
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

API_URL = "https://api.twitter.com/1.1/statuses/show.json"

PROMPT_TEXT = "Input tweet URL"
FETCHING_TEXT = "Fetching tweet"
OK_TEXT = "<font color=green>Ok</font>"
INVALID_URL_TEXT = "<font color=red>Invalid Tweet URL</font>"
NO_TOKEN_TEXT = "<font color=red>Getting Auth Token/Failed to get Auth Token</font>"

TWEET_URL_PATTERN = re.compile(r"/twitter\.com/(\w*)/status/(\d*)")

_URL_KEYS = ("url", "display_url", "expanded_url")
_MEDIA_KEYS = ("url", "display_url", "expanded_url", "type", "media_url")

Sender = Callable[[urllib.request.Request], "tuple[bytes, bool]"]


class TwitterAuth(Protocol):
    """Supplies the bearer token used for API requests."""

    def linked(self) -> bool: ...

    def token(self) -> str: ...

    def link(self) -> None: ...


def _send_with_urllib(request: urllib.request.Request) -> tuple[bytes, bool]:
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            return response.read(), False
    except urllib.error.HTTPError as error:
        return error.read(), True
    except urllib.error.URLError as error:
        return str(error.reason).encode("utf-8"), True


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _url_file_name(url: str) -> str:
    return posixpath.basename(urllib.parse.urlsplit(url).path)


def parse_tweet_url(url: str) -> tuple[str, str]:
    """Return the user name and status id in a tweet URL.

    Raises ValueError when *url* is not a tweet URL.
    """
    match = TWEET_URL_PATTERN.search(url)
    if match is None:
        raise ValueError(f"not a tweet URL: {url!r}")
    return match.group(1), match.group(2)


class TwitterWidget:
    """Holds the last fetched tweet and saves its images under ``path``."""

    def __init__(
        self,
        handler: TwitterAuth,
        path: str = "",
        embed: bool = False,
        sender: Sender | None = None,
    ) -> None:
        self.handler = handler
        self.path = path
        self.embed = embed
        self.sender: Sender = sender or _send_with_urllib
        self.status_text = PROMPT_TEXT
        self.username = ""
        self.tweet_id = ""
        self.tweet_text = ""
        self.twitter_name = ""
        self.created_at = ""
        self.profile_pic_url = ""
        self.profile_pic_filename = ""
        self.tweet_json: dict[str, Any] = {}
        self.urls: list[dict[str, str]] = []
        self.media: list[dict[str, str]] = []
        self.pic_done = False
        self.media_done = False

    def fetch_tweet(self, url: str) -> None:
        """Fetch the tweet at *url*, asking for a token first when there is none."""
        if not self.handler.linked():
            self.handler.link()
            self.status_text = NO_TOKEN_TEXT
            return
        try:
            username, tweet_id = parse_tweet_url(url)
        except ValueError:
            self.status_text = INVALID_URL_TEXT
            return

        self.status_text = FETCHING_TEXT
        self.username = username
        self.tweet_id = tweet_id
        request = urllib.request.Request(
            f"{API_URL}?id={tweet_id}&include_entities=true&tweet_mode=extended",
            headers={"Authorization": "Bearer " + self.handler.token()},
        )
        body, _failed = self.sender(request)
        self.process_reply(body)

    def process_reply(self, body: str | bytes) -> None:
        """Read a tweet response and download any image not yet saved."""
        self.pic_done = False
        self.media_done = False
        self.urls = []
        self.media = []

        text = body.decode("utf-8", "replace") if isinstance(body, bytes) else body
        try:
            document = json.loads(text)
        except ValueError:
            document = None
        tweet = _as_dict(document)
        self.tweet_json = tweet

        user = _as_dict(tweet.get("user"))
        self.tweet_text = _text(tweet.get("full_text"))
        self.twitter_name = _text(user.get("name"))
        self.created_at = _text(tweet.get("created_at"))
        self.profile_pic_url = _text(user.get("profile_image_url")).replace("_normal", "")

        for item in _as_list(_as_dict(tweet.get("entities")).get("urls")):
            entry = _as_dict(item)
            self.urls.append({key: _text(entry.get(key)) for key in _URL_KEYS})

        self.media_done = True
        pending_media = ""
        for index, item in enumerate(_as_list(_as_dict(tweet.get("extended_entities")).get("media"))):
            raw = _as_dict(item)
            entry = {key: _text(raw.get(key)) for key in _MEDIA_KEYS}
            if index == 0 and entry["type"] == "photo":
                entry["filename"] = _url_file_name(entry["media_url"])
                if not self._media_path(entry["filename"]).exists():
                    self.media_done = False
                    pending_media = entry["media_url"]
            self.media.append(entry)

        self.profile_pic_filename = _url_file_name(self.profile_pic_url)
        need_picture = bool(self.profile_pic_filename) and not Path(
            self.profile_pic_full_path()
        ).exists()
        self.pic_done = not need_picture

        if pending_media:
            self.store_media(self._download(pending_media))
        if need_picture:
            self.store_profile_picture(self._download(self.profile_pic_url))
        self._report_done()

    def store_profile_picture(self, data: bytes) -> None:
        """Save downloaded profile picture bytes."""
        target = Path(self.path + _url_file_name(self.profile_pic_url))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        self.pic_done = True
        self._report_done()

    def store_media(self, data: bytes) -> None:
        """Save downloaded bytes of the tweet's first photo."""
        if not self.media or "filename" not in self.media[0]:
            raise ValueError("the tweet has no photo to store")
        target = self._media_path(self.media[0]["filename"])
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        self.media_done = True
        self._report_done()

    def profile_pic_full_path(self) -> str:
        """Where the profile picture of the last tweet is saved."""
        return self.path + self.profile_pic_filename

    def _media_path(self, filename: str) -> Path:
        return Path(self.path + "media/" + filename)

    def _download(self, url: str) -> bytes:
        data, _failed = self.sender(urllib.request.Request(url))
        return data

    def _report_done(self) -> None:
        if self.pic_done and self.media_done:
            self.status_text = OK_TEXT