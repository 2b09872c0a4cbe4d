"""Tests for content comparison and collision resolution."""

from unittest.mock import patch

from picture_organizer.duplicates import CollisionResolver, files_identical, suffixed_name


class TestFilesIdentical:
    """Byte for byte comparison."""

    def test_same_content(self, tmp_path):
        a = tmp_path / 'a.bin'
        b = tmp_path / 'b.bin'
        a.write_bytes(b'x' * 5000)
        b.write_bytes(b'x' * 5000)

        assert files_identical(a, b, chunk_size=1024)

    def test_difference_in_last_chunk(self, tmp_path):
        a = tmp_path / 'a.bin'
        b = tmp_path / 'b.bin'
        a.write_bytes(b'x' * 4999 + b'1')
        b.write_bytes(b'x' * 4999 + b'2')

        assert not files_identical(a, b, chunk_size=1024)

    def test_different_length_is_not_read(self, tmp_path):
        a = tmp_path / 'a.bin'
        b = tmp_path / 'b.bin'
        a.write_bytes(b'abc')
        b.write_bytes(b'abcd')

        with patch('builtins.open') as mock_open:
            assert not files_identical(a, b)
        mock_open.assert_not_called()

    def test_empty_files_are_identical(self, tmp_path):
        a = tmp_path / 'a.bin'
        b = tmp_path / 'b.bin'
        a.write_bytes(b'')
        b.write_bytes(b'')

        assert files_identical(a, b)


class TestCollisionResolver:
    """Duplicate and rename decisions."""

    def test_free_destination_is_accepted(self, tmp_path):
        source = tmp_path / 'src.png'
        source.write_bytes(b'data')
        candidate = tmp_path / 'dest' / 'img.png'

        resolution = CollisionResolver().resolve(source, candidate)

        assert resolution.path == candidate
        assert not resolution.duplicate
        assert not resolution.renamed

    def test_identical_existing_file_is_duplicate(self, tmp_path):
        source = tmp_path / 'src.png'
        source.write_bytes(b'same')
        candidate = tmp_path / 'img.png'
        candidate.write_bytes(b'same')

        resolution = CollisionResolver().resolve(source, candidate)

        assert resolution.duplicate
        assert resolution.path == candidate

    def test_different_existing_file_gets_suffix(self, tmp_path):
        source = tmp_path / 'src.png'
        source.write_bytes(b'new')
        candidate = tmp_path / 'img.png'
        candidate.write_bytes(b'old')

        resolution = CollisionResolver().resolve(source, candidate)

        assert resolution.renamed
        assert resolution.path == tmp_path / 'img_1.png'

    def test_first_unused_suffix_is_taken_without_comparing(self, tmp_path):
        source = tmp_path / 'src.png'
        source.write_bytes(b'new')
        candidate = tmp_path / 'img.png'
        candidate.write_bytes(b'old')
        # Same content as the source, but only the plain name is compared
        (tmp_path / 'img_1.png').write_bytes(b'new')

        resolution = CollisionResolver().resolve(source, candidate)

        assert resolution.path == tmp_path / 'img_2.png'
        assert not resolution.duplicate

    def test_planned_destinations_count_as_taken(self, tmp_path):
        planned_source = tmp_path / 'first.png'
        planned_source.write_bytes(b'first')
        source = tmp_path / 'second.png'
        source.write_bytes(b'second')
        candidate = tmp_path / 'out' / 'img.png'

        resolution = CollisionResolver().resolve(source, candidate, {candidate: planned_source})

        assert resolution.renamed
        assert resolution.path == tmp_path / 'out' / 'img_1.png'

    def test_planned_destination_with_same_content_is_duplicate(self, tmp_path):
        planned_source = tmp_path / 'first.png'
        planned_source.write_bytes(b'same')
        source = tmp_path / 'second.png'
        source.write_bytes(b'same')
        candidate = tmp_path / 'out' / 'img.png'

        resolution = CollisionResolver().resolve(source, candidate, {candidate: planned_source})

        assert resolution.duplicate

    def test_suffixed_name(self, tmp_path):
        assert suffixed_name(tmp_path / 'a.tar.gz', 3) == tmp_path / 'a.tar_3.gz'
        assert suffixed_name(tmp_path / 'noext', 1) == tmp_path / 'noext_1'
