import json

import pytest

from streamdeckctl.twitter import TwitterWidget, parse_tweet_url

AVATAR_URL = "https://pbs.example.com/profile_images/1/avatar_normal.jpg"
PHOTO_URL = "https://pbs.example.com/media/photo.jpg"


class FakeAuth:
    def __init__(self, linked=True):
        self._linked = linked
        self.link_calls = 0

    def linked(self):
        return self._linked

    def token(self):
        return "token"

    def link(self):
        self.link_calls += 1


class FakeSender:
    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responses.get(request.full_url, b""), False


def _tweet(media=None):
    tweet = {
        "full_text": "Hello world",
        "created_at": "Mon Jan 01 00:00:00 +0000 2024",
        "user": {"name": "Some One", "profile_image_url": AVATAR_URL},
        "entities": {"urls": [
            {"url": "https://t.example.com/x", "display_url": "example.com/x",
             "expanded_url": "https://example.com/x"},
        ]},
    }
    if media is not None:
        tweet["extended_entities"] = {"media": media}
    return tweet


def _photo():
    return {"url": "https://t.example.com/p", "display_url": "pic", "expanded_url": "e",
            "type": "photo", "media_url": PHOTO_URL}


def test_parse_tweet_url():
    assert parse_tweet_url("https://twitter.com/someone/status/12345") == ("someone", "12345")


def test_parse_tweet_url_needs_leading_slash():
    with pytest.raises(ValueError):
        parse_tweet_url("twitter.com/someone/status/12345")


def test_fetch_without_token_links():
    auth = FakeAuth(linked=False)
    sender = FakeSender({})
    widget = TwitterWidget(auth, sender=sender)
    widget.fetch_tweet("https://twitter.com/someone/status/1")
    assert auth.link_calls == 1
    assert sender.requests == []
    assert widget.status_text == "<font color=red>Getting Auth Token/Failed to get Auth Token</font>"


def test_fetch_invalid_url():
    sender = FakeSender({})
    widget = TwitterWidget(FakeAuth(), sender=sender)
    widget.fetch_tweet("https://example.com/nothing")
    assert widget.status_text == "<font color=red>Invalid Tweet URL</font>"
    assert sender.requests == []


def test_fetch_tweet_stores_profile_picture(tmp_path):
    api_url = ("https://api.twitter.com/1.1/statuses/show.json?id=77"
               "&include_entities=true&tweet_mode=extended")
    sender = FakeSender({
        api_url: json.dumps(_tweet()).encode(),
        AVATAR_URL.replace("_normal", ""): b"avatar-bytes",
    })
    widget = TwitterWidget(FakeAuth(), path=str(tmp_path) + "/", sender=sender)
    widget.fetch_tweet("https://twitter.com/someone/status/77")

    assert sender.requests[0].full_url == api_url
    assert sender.requests[0].get_header("Authorization") == "Bearer token"
    assert widget.username == "someone"
    assert widget.tweet_id == "77"
    assert widget.tweet_text == "Hello world"
    assert widget.twitter_name == "Some One"
    assert widget.profile_pic_filename == "avatar.jpg"
    assert (tmp_path / widget.profile_pic_filename).read_bytes() == b"avatar-bytes"
    assert widget.profile_pic_full_path() == str(tmp_path) + "/" + widget.profile_pic_filename
    assert widget.status_text == "<font color=green>Ok</font>"


def test_process_reply_collects_urls(tmp_path):
    widget = TwitterWidget(FakeAuth(), path=str(tmp_path) + "/", sender=FakeSender({}))
    widget.process_reply(json.dumps(_tweet()))
    assert widget.urls == [{"url": "https://t.example.com/x", "display_url": "example.com/x",
                            "expanded_url": "https://example.com/x"}]
    assert widget.tweet_json["full_text"] == "Hello world"


def test_existing_picture_is_not_downloaded(tmp_path):
    (tmp_path / "avatar.jpg").write_bytes(b"kept")
    sender = FakeSender({})
    widget = TwitterWidget(FakeAuth(), path=str(tmp_path) + "/", sender=sender)
    widget.process_reply(json.dumps(_tweet()))
    assert sender.requests == []
    assert (tmp_path / "avatar.jpg").read_bytes() == b"kept"
    assert widget.pic_done is True


def test_first_photo_is_downloaded(tmp_path):
    sender = FakeSender({PHOTO_URL: b"photo-bytes"})
    widget = TwitterWidget(FakeAuth(), path=str(tmp_path) + "/", sender=sender)
    widget.process_reply(json.dumps(_tweet(media=[_photo()])))
    assert widget.media[0]["filename"] == "photo.jpg"
    assert (tmp_path / "media" / "photo.jpg").read_bytes() == b"photo-bytes"
    assert widget.media_done is True
    assert widget.status_text == "<font color=green>Ok</font>"


def test_store_media_without_photo_raises(tmp_path):
    widget = TwitterWidget(FakeAuth(), path=str(tmp_path) + "/", sender=FakeSender({}))
    with pytest.raises(ValueError):
        widget.store_media(b"data")