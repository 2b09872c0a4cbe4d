"""Tests for file name validation."""

import pytest

from picture_organizer.validation import (
    POSIX_INVALID_CHARS,
    WINDOWS_INVALID_CHARS,
    validate_file_name,
)


def test_should_accept_regular_names():
    assert validate_file_name('photo.jpg') is None
    assert validate_file_name('IMG_0001_1.png', WINDOWS_INVALID_CHARS) is None
    assert validate_file_name('console.jpg') is None


@pytest.mark.parametrize('name', ['CON.jpg', 'con.JPG', 'Prn.png', 'aux.mp4', 'NUL.pdf',
                                  'COM1.jpg', 'com9.gif', 'LPT1.doc', 'lpt9.zip', 'CON'])
def test_should_reject_reserved_device_names(name):
    assert validate_file_name(name) == "reserved name error"


def test_should_allow_reserved_words_with_extra_characters():
    assert validate_file_name('COM10.jpg') is None
    assert validate_file_name('CONFIG.jpg') is None


def test_should_report_first_offending_character():
    assert validate_file_name('a?b*.jpg', WINDOWS_INVALID_CHARS) == "invalid character error '?'"
    assert validate_file_name('tab\there.jpg', WINDOWS_INVALID_CHARS) == "invalid character error '\t'"


def test_should_reject_separator_on_posix():
    assert validate_file_name('a/b.jpg', POSIX_INVALID_CHARS) == "invalid character error '/'"
    assert validate_file_name('a:b.jpg', POSIX_INVALID_CHARS) is None


def test_should_enforce_length_limit():
    assert validate_file_name('a' * 251 + '.jpg') is None
    assert validate_file_name('a' * 252 + '.jpg') == "length error"
