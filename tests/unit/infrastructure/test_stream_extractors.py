"""Tests for the per-hoster stream extractors."""

from __future__ import annotations

import re
import time
from typing import Any

import pytest

from extractarr.domain.entities.media import StreamFormat
from extractarr.infrastructure.hoster_extractors import (
    DoodstreamExtractor,
    FilemoonExtractor,
    LoadXExtractor,
    LuluvdoExtractor,
    SpeedFilesExtractor,
    StreamtapeExtractor,
    VidmolyExtractor,
    VidozaExtractor,
    VoeExtractor,
)
from extractarr.infrastructure.hoster_extractors.doodstream import (
    _find_pass_md5_path,
    _find_token,
    build_video_url,
)
from extractarr.infrastructure.hoster_extractors.speedfiles import _decode_payload
from extractarr.infrastructure.hoster_extractors.streamtape import _join_botlink
from extractarr.infrastructure.hoster_extractors.voe import (
    _decode_hls_field,
    _decode_json_script,
    _find_redirect,
)
from extractarr.infrastructure.http.constants import MOBILE_FIREFOX_USER_AGENT

# base64("https://cdn.example.com/master.m3u8")
_HLS_B64 = "aHR0cHM6Ly9jZG4uZXhhbXBsZS5jb20vbWFzdGVyLm0zdTg="

# {"source":"https://cdn.example.com/v.m3u8"} through the VOE JSON chain.
_VOE_JSON_PAYLOAD = (
    "DROHnJkdI2q9Z3OCAGkJMKyEpR9ir0czq0yXnT84oTIhHGICrKW9MacIF2qlGJkFoSt1KUkMAzI9GKkb"
)

# "https://cdn.speedfiles.net/video.mp4" through the SpeedFiles chain.
_SPEEDFILES_PAYLOAD = (
    "Wm1KbjBDSnkwdXRuNG1KeTNlMm5LcnR6MHl3bldxWm4xS1puMENKeTNxd240bWRvMW1nbjJxSnox"
    "aTJuSHJkbjFhWm4xQ3R5M3Fnbk16dG5aeWRuMnVkb1pDSm5IRGR6MHEybUp2WnkyeTJtNUNkbTJp"
    "Z24ybVptM3VKbklyZG4="
)

_PACKED_FILE_SCRIPT = (
    "<script>eval(function(p,a,c,k,e,d){while(c--)if(k[c])p=p.replace("
    "new RegExp('\\\\b'+c.toString(a)+'\\\\b','g'),k[c]);return p}"
    "('0({1:\"2\"})',3,3,'setup|file|https://cdn.example.com/hls/packed.m3u8'"
    ".split('|')))</script>"
)


class TestVidoza:
    @pytest.mark.asyncio
    async def test_video_src(self, fake_http: Any) -> None:
        url = "https://vidoza.net/embed-abc.html"
        fake_http.add(url, '<video id="player" src="https://str.vidoza.net/v.mp4"></video>')

        source = await VidozaExtractor(fake_http).extract(url)

        assert source is not None
        assert source.url == "https://str.vidoza.net/v.mp4"
        assert source.format is StreamFormat.MP4
        assert source.server == "Vidoza"

    @pytest.mark.asyncio
    async def test_falls_back_to_first_source_tag(self, fake_http: Any) -> None:
        url = "https://vidoza.net/embed-abc.html"
        fake_http.add(
            url,
            "<video id='p'>"
            '<source src="https://str.vidoza.net/first.mp4" type="video/mp4">'
            '<source src="https://str.vidoza.net/second.mp4" type="video/mp4">'
            "</video>",
        )
        source = await VidozaExtractor(fake_http).extract(url)
        assert source is not None
        assert source.url == "https://str.vidoza.net/first.mp4"

    @pytest.mark.asyncio
    async def test_no_match_is_none(self, fake_http: Any) -> None:
        url = "https://vidoza.net/embed-abc.html"
        fake_http.add(url, "<html>File was deleted</html>")
        assert await VidozaExtractor(fake_http).extract(url) is None

    @pytest.mark.asyncio
    async def test_http_error_is_none(self, fake_http: Any) -> None:
        url = "https://vidoza.net/embed-abc.html"
        fake_http.add(url, status=404)
        assert await VidozaExtractor(fake_http).extract(url) is None


class TestVidmoly:
    @pytest.mark.asyncio
    async def test_sources_literal_with_referer(self, fake_http: Any) -> None:
        url = "https://vidmoly.to/embed-xyz.html"
        fake_http.add(
            url,
            'player.setup({sources: [{file:"https://box.vidmoly.to/hls/x/master.m3u8"}]})',
        )

        source = await VidmolyExtractor(fake_http).extract(url)

        assert source is not None
        assert source.format is StreamFormat.M3U8
        assert source.headers == {"Referer": "https://vidmoly.to/"}
        assert source.requires_headers is True
        assert fake_http.calls[0]["headers"]["Referer"] == "https://vidmoly.to/"


class TestVoe:
    def test_find_redirect_js(self) -> None:
        html = "<script>window.location.href = 'https://voe.sx/e/abc123';</script>"
        assert _find_redirect(html) == "https://voe.sx/e/abc123"

    def test_decode_hls_field(self) -> None:
        html = f"var sources = {{'hls': '{_HLS_B64}', 'video_height': 1080}};"
        assert _decode_hls_field(html) == "https://cdn.example.com/master.m3u8"

    def test_decode_hls_field_not_base64(self) -> None:
        assert _decode_hls_field("'hls': '!!!not-base64!!!'") is None

    def test_decode_json_script(self) -> None:
        html = f'<script type="application/json">["{_VOE_JSON_PAYLOAD}"]</script>'
        assert _decode_json_script(html) == "https://cdn.example.com/v.m3u8"

    @pytest.mark.asyncio
    async def test_follows_client_side_hop(self, fake_http: Any) -> None:
        first = "https://voe.sx/abc123"
        second = "https://voe.sx/e/abc123"
        fake_http.add(first, f"<script>window.location.href = '{second}';</script>")
        fake_http.add(second, f"<script>var s = {{'hls': '{_HLS_B64}'}};</script>")

        source = await VoeExtractor(fake_http).extract(first)

        assert source is not None
        assert source.url == "https://cdn.example.com/master.m3u8"
        assert source.format is StreamFormat.M3U8
        assert [c["url"] for c in fake_http.calls] == [first, second]

    @pytest.mark.asyncio
    async def test_secondary_page_failure_is_none(self, fake_http: Any) -> None:
        first = "https://voe.sx/abc123"
        fake_http.add(first, "<script>window.location.href = 'https://voe.sx/e/gone';</script>")
        fake_http.add("https://voe.sx/e/gone", status=500)
        assert await VoeExtractor(fake_http).extract(first) is None


class TestStreamtape:
    def test_join_botlink_with_substrings(self) -> None:
        html = (
            "document.getElementById('botlink').innerHTML = '//streamtape.com/get_v'+ "
            "('xcdideo?id=abc&expires=1&ip=x&token=t').substring(1).substring(2);"
        )
        assert (
            _join_botlink(html)
            == "https://streamtape.com/get_video?id=abc&expires=1&ip=x&token=t"
        )

    def test_join_botlink_default_offset(self) -> None:
        html = (
            "document.getElementById('botlink').innerHTML = '//streamtape.com/get_'+ "
            "('xxxxvideo?id=1')"
        )
        assert _join_botlink(html) == "https://streamtape.com/get_video?id=1"

    @pytest.mark.asyncio
    async def test_extract_is_mp4(self, fake_http: Any) -> None:
        url = "https://streamtape.com/e/abc"
        fake_http.add(
            url,
            "<script>document.getElementById('botlink').innerHTML = "
            "'//streamtape.com/get_v'+ ('xcdideo?id=abc').substring(1).substring(2);"
            "</script>",
        )
        source = await StreamtapeExtractor(fake_http).extract(url)
        assert source is not None
        assert source.url == "https://streamtape.com/get_video?id=abc"
        assert source.format is StreamFormat.MP4

    @pytest.mark.asyncio
    async def test_query_block_fallback(self, fake_http: Any) -> None:
        url = "https://streamtape.com/e/abc"
        fake_http.add(
            url, '<div id="x">/get_video?id=abc&expires=123&ip=1.2.3.4&token=tok"</div>'
        )
        source = await StreamtapeExtractor(fake_http).extract(url)
        assert source is not None
        assert source.url == (
            "https://streamtape.com/get_video?id=abc&expires=123&ip=1.2.3.4&token=tok&stream=1"
        )


class TestSpeedFiles:
    def test_decode_payload(self) -> None:
        assert _decode_payload(_SPEEDFILES_PAYLOAD) == "https://cdn.speedfiles.net/video.mp4"

    def test_decode_garbage(self) -> None:
        assert not _decode_payload("@@@")

    @pytest.mark.asyncio
    async def test_extract(self, fake_http: Any) -> None:
        url = "https://speedfiles.net/a1b2c3"
        fake_http.add(url, f'<script>var _0x5opu234 = "{_SPEEDFILES_PAYLOAD}";</script>')
        source = await SpeedFilesExtractor(fake_http).extract(url)
        assert source is not None
        assert source.url == "https://cdn.speedfiles.net/video.mp4"
        assert source.server == "SpeedFiles"


class TestLuluvdo:
    @pytest.mark.asyncio
    async def test_embed_lookup_with_mobile_agent(self, fake_http: Any) -> None:
        url = "https://luluvdo.com/e/code123"
        embed = "https://luluvdo.com/dl?op=embed&file_code=code123"
        fake_http.add(url, "<html></html>")
        fake_http.add(embed, 'jwplayer().setup({file: "https://cdn.lulu.st/hls/x/master.m3u8"})')

        source = await LuluvdoExtractor(fake_http).extract(url)

        assert source is not None
        assert source.format is StreamFormat.M3U8
        assert source.headers == {"User-Agent": MOBILE_FIREFOX_USER_AGENT}
        assert source.requires_headers is True
        assert fake_http.calls_to(embed)[0]["headers"]["User-Agent"] == (
            MOBILE_FIREFOX_USER_AGENT
        )


class TestLoadX:
    @pytest.mark.asyncio
    async def test_head_then_player_api(self, fake_http: Any) -> None:
        url = "https://loadx.ws/video/hash123/name"
        api = "https://loadx.ws/player/index.php?data=hash123&do=getVideo"
        fake_http.add(url, method="HEAD")
        fake_http.add(api, '{"videoSource": "https://cdn.loadx.ws/stream/x"}', method="POST")

        source = await LoadXExtractor(fake_http).extract(url)

        assert source is not None
        assert source.url == "https://cdn.loadx.ws/stream/x"
        assert source.format is StreamFormat.M3U8
        assert source.force_hls is True
        post = fake_http.calls_to(api)[0]
        assert post["method"] == "POST"
        assert post["headers"] == {"X-Requested-With": "XMLHttpRequest"}

    @pytest.mark.asyncio
    async def test_invalid_json_is_none(self, fake_http: Any) -> None:
        url = "https://loadx.ws/video/hash123/name"
        fake_http.add(url, method="HEAD")
        fake_http.add(
            "https://loadx.ws/player/index.php?data=hash123&do=getVideo",
            "<html>",
            method="POST",
        )
        assert await LoadXExtractor(fake_http).extract(url) is None

    @pytest.mark.parametrize(
        "payload", ['{"videoSource": {"hls": "x"}}', '{"videoSource": 42}', '{"videoSource": "  "}']
    )
    @pytest.mark.asyncio
    async def test_non_string_video_source_is_none(self, fake_http: Any, payload: str) -> None:
        url = "https://loadx.ws/video/abc123/name"
        fake_http.add(url, method="HEAD")
        fake_http.add(
            "https://loadx.ws/player/index.php?data=abc123&do=getVideo",
            payload,
            method="POST",
        )
        assert await LoadXExtractor(fake_http).extract(url) is None


class TestFilemoon:
    @pytest.mark.asyncio
    async def test_iframe_hop_and_packed_config(self, fake_http: Any) -> None:
        url = "https://filemoon.sx/e/moon1"
        frame = "https://filemoon.sx/iframe/moon1"
        fake_http.add(url, f'<iframe class="player" src="{frame}" allowfullscreen></iframe>')
        fake_http.add(frame, _PACKED_FILE_SCRIPT)

        source = await FilemoonExtractor(fake_http).extract(url)

        assert source is not None
        assert source.url == "https://cdn.example.com/hls/packed.m3u8"
        assert source.format is StreamFormat.M3U8
        assert fake_http.calls_to(frame)[0]["headers"]["Sec-Fetch-Dest"] == "iframe"

    @pytest.mark.asyncio
    async def test_plain_config_without_iframe(self, fake_http: Any) -> None:
        url = "https://filemoon.sx/e/moon1"
        fake_http.add(url, 'sources: [{file: "https://cdn.example.com/plain.m3u8"}]')
        source = await FilemoonExtractor(fake_http).extract(url)
        assert source is not None
        assert source.url == "https://cdn.example.com/plain.m3u8"


class TestDoodstream:
    _PAGE = (
        "<script>$.get('/pass_md5/abc123/def456', function(data)"
        "{ var token = '&token=a1b2c3d4e5'; });</script>"
    )

    def test_find_pass_md5_and_token(self) -> None:
        path = _find_pass_md5_path(self._PAGE)
        assert path == "/pass_md5/abc123/def456"
        assert _find_token(self._PAGE, path) == "a1b2c3d4e5"

    def test_token_falls_back_to_path_tail(self) -> None:
        assert _find_token("no token here", "/pass_md5/abc/zzz999") == "zzz999"

    def test_build_video_url_shape(self) -> None:
        url = build_video_url("https://cdn.dood.video/x/", "tok", now=lambda: 1700000000.4)
        assert re.fullmatch(
            r"https://cdn\.dood\.video/x/[A-Za-z0-9]{10}\?token=tok&expiry=1700000000", url
        )

    @pytest.mark.asyncio
    async def test_synthesized_url(self, fake_http: Any) -> None:
        url = "https://dood.li/e/xyz123"
        fake_http.add(url, self._PAGE)
        fake_http.add("https://dood.li/pass_md5/abc123/def456", "  https://cdn.dood.video/abc/\n")

        source = await DoodstreamExtractor(fake_http).extract(url)

        assert source is not None
        m = re.fullmatch(
            r"https://cdn\.dood\.video/abc/[A-Za-z0-9]{10}\?token=a1b2c3d4e5&expiry=(\d+)",
            source.url,
        )
        assert m is not None
        assert abs(int(m.group(1)) - time.time()) <= 2
        assert source.format is StreamFormat.MP4
        assert source.headers == {"Referer": "https://dood.li/"}

    @pytest.mark.asyncio
    async def test_captcha_page_is_none(self, fake_http: Any) -> None:
        url = "https://dood.li/e/xyz123"
        fake_http.add(url, '<div class="g-recaptcha" data-sitekey="6Lc"></div>')
        assert await DoodstreamExtractor(fake_http).extract(url) is None
        assert len(fake_http.calls) == 1

    @pytest.mark.asyncio
    async def test_network_error_is_none(self, fake_http: Any) -> None:
        url = "https://dood.li/e/xyz123"
        fake_http.fail(url)
        assert await DoodstreamExtractor(fake_http).extract(url) is None
