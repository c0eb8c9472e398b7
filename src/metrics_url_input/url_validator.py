"""
URL format validation module.

Decides whether a field value parses as an absolute URL (scheme + host)
before any network probe is attempted.
"""

import ipaddress
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

import idna

from .enums import UrlValidationErrorCode
from .exceptions import FormatError


# Message surfaced inline next to the field for every format failure
INVALID_URL_MESSAGE = "Please enter a valid URL."

# Stripped from both ends before parsing, as browsers do with pasted URLs
C0_CONTROL_OR_SPACE = "".join(chr(c) for c in range(0x21))

# Control characters and whitespace are never part of a URL
FORBIDDEN_CHARS_PATTERN = re.compile(r"[\x00-\x20\x7f]")

# Code points that may not appear in an ASCII host label; "_" and "-" are allowed
FORBIDDEN_HOST_CHARS_PATTERN = re.compile(r"[#%/:<>?@\[\\\]^|]")

SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")


@dataclass
class UrlValidationError:
    """Structured error information for URL validation failures."""

    code: UrlValidationErrorCode
    message: str
    details: dict


@dataclass
class UrlValidationResult:
    """Result of URL validation operation."""

    valid: bool
    url: Optional[str]
    error: Optional[UrlValidationError]


class UrlValidator:
    """
    Validates the metrics URL field.

    A value is valid when it has a scheme, a host, and (if present) a
    numeric port in range. The host is an IP address or a sequence of
    non-empty labels: ASCII labels must avoid the forbidden host code
    points (so "node_exporter" is fine), non-ASCII labels must be
    IDNA-encodable. The accepted URL is the input with surrounding
    whitespace removed.
    """

    def validate(self, raw_url: str) -> UrlValidationResult:
        """
        Validate a URL string.

        Leading and trailing control characters and spaces are stripped;
        the stripped value is what an accepted result carries.

        Args:
            raw_url: The raw field value

        Returns:
            UrlValidationResult with the URL or a structured error
        """
        url = (raw_url or "").strip(C0_CONTROL_OR_SPACE)
        if not url:
            return self._failure(UrlValidationErrorCode.EMPTY_INPUT, raw_url)

        if FORBIDDEN_CHARS_PATTERN.search(url):
            return self._failure(
                UrlValidationErrorCode.FORBIDDEN_CHARS,
                raw_url,
                forbidden_chars=FORBIDDEN_CHARS_PATTERN.findall(url),
            )

        try:
            parts = urlsplit(url)
        except ValueError as e:
            # urlsplit rejects malformed IPv6 brackets
            return self._failure(UrlValidationErrorCode.INVALID_HOST, raw_url, reason=str(e))

        if not parts.scheme or not SCHEME_PATTERN.match(parts.scheme):
            return self._failure(UrlValidationErrorCode.MISSING_SCHEME, raw_url)

        if not parts.netloc or not parts.hostname:
            return self._failure(UrlValidationErrorCode.MISSING_HOST, raw_url)

        try:
            parts.port
        except ValueError as e:
            return self._failure(UrlValidationErrorCode.INVALID_PORT, raw_url, reason=str(e))

        host_error = self._check_host(parts.hostname)
        if host_error:
            return self._failure(
                UrlValidationErrorCode.INVALID_HOST,
                raw_url,
                host=parts.hostname,
                reason=host_error,
            )

        return UrlValidationResult(valid=True, url=url, error=None)

    def is_valid(self, raw_url: str) -> bool:
        return self.validate(raw_url).valid

    def require_valid(self, raw_url: str) -> str:
        """
        Validate and return the URL, stripped of surrounding whitespace.

        Raises:
            FormatError: If the value is not a valid absolute URL
        """
        result = self.validate(raw_url)
        if not result.valid:
            raise FormatError(
                code=result.error.code.value,
                message=result.error.message,
                details=result.error.details,
            )
        return result.url

    def _check_host(self, hostname: str) -> Optional[str]:
        """Return an error description for an invalid host, or None."""
        try:
            ipaddress.ip_address(hostname)
            return None
        except ValueError:
            pass

        labels = hostname.rstrip(".").split(".")
        if any(not label for label in labels):
            return "empty label"

        for label in labels:
            if label.isascii():
                forbidden = FORBIDDEN_HOST_CHARS_PATTERN.search(label)
                if forbidden:
                    return f"forbidden host code point {forbidden.group()!r} in {label!r}"
                continue

            # Only internationalized labels go through IDNA
            try:
                idna.encode(label, uts46=True)
            except idna.IDNAError as e:
                return f"IDNA encoding failed: {e}"

        return None

    def _failure(
        self,
        code: UrlValidationErrorCode,
        raw_url: str,
        **details,
    ) -> UrlValidationResult:
        return UrlValidationResult(
            valid=False,
            url=None,
            error=UrlValidationError(
                code=code,
                message=INVALID_URL_MESSAGE,
                details={"raw_input": raw_url, **details},
            ),
        )
