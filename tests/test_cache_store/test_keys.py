"""Tests for cache key derivation."""

from __future__ import annotations

import pytest

from apicache.cache import derive_cache_key


class TestDeriveCacheKey:
    def test_method_and_url_only(self) -> None:
        assert derive_cache_key("GET", "/upload?page=1") == "method=GET&url=/upload?page=1"

    def test_discriminators_come_first(self) -> None:
        key = derive_cache_key("GET", "/upload", {"user": 7})
        assert key == "user=7&method=GET&url=/upload"

    def test_discriminator_order_does_not_matter(self) -> None:
        a = derive_cache_key("GET", "/u", {"b": 2, "a": 1})
        b = derive_cache_key("GET", "/u", {"a": 1, "b": 2})
        assert a == b == "a=1&b=2&method=GET&url=/u"

    def test_is_deterministic(self) -> None:
        args = ("POST", "https://api.example.com/upload", {"lang": "en"})
        assert derive_cache_key(*args) == derive_cache_key(*args)

    def test_method_is_upper_cased(self) -> None:
        assert derive_cache_key("get", "/u") == derive_cache_key("GET", "/u")

    def test_method_and_url_override_discriminators(self) -> None:
        key = derive_cache_key("GET", "/real", {"url": "/fake", "method": "PUT"})
        assert key == "method=GET&url=/real"

    @pytest.mark.parametrize(
        "method,url,discriminators",
        [
            ("GET", "/u", {"a": 1}),
            ("DELETE", "/u", {"a": 1}),
            ("GET", "/v", {"a": 1}),
            ("GET", "/u", {"a": 2}),
            ("GET", "/u", {}),
        ],
    )
    def test_any_difference_changes_the_key(self, method, url, discriminators) -> None:
        assert derive_cache_key(method, url, discriminators) != derive_cache_key(
            "GET", "/u", {"a": 3}
        )

    def test_ampersand_in_url_is_escaped(self) -> None:
        key = derive_cache_key("GET", "/u?a=1&b=2")
        assert key == "method=GET&url=/u?a=1%26b=2"

    def test_values_are_stringified(self) -> None:
        key = derive_cache_key("GET", "/u", {"flag": True, "none": None, "n": 1.5})
        assert key == "flag=true&n=1.5&none=null&method=GET&url=/u"

    def test_spaces_are_plus_encoded(self) -> None:
        assert derive_cache_key("GET", "/u", {"q": "a b"}) == "q=a+b&method=GET&url=/u"

    def test_equals_sign_in_discriminators_is_escaped(self) -> None:
        in_name = derive_cache_key("GET", "/u", {"a=b": "c"})
        in_value = derive_cache_key("GET", "/u", {"a": "b=c"})
        assert in_name == "a%3Db=c&method=GET&url=/u"
        assert in_value == "a=b%3Dc&method=GET&url=/u"

    def test_ampersand_in_discriminators_is_escaped(self) -> None:
        assert derive_cache_key("GET", "/u", {"a": "1&b=2"}) != derive_cache_key(
            "GET", "/u", {"a": "1", "b": "2"}
        )

    def test_reserved_characters_in_values_are_escaped(self) -> None:
        key = derive_cache_key("GET", "/u", {"path": "/x?y:z"})
        assert key == "path=%2Fx%3Fy%3Az&method=GET&url=/u"
