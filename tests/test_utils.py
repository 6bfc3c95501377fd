from picker.utils import dedupe_ids, thumbnail_url


def test_thumbnail_url():
    assert thumbnail_url("abc123") == "https://img.youtube.com/vi/abc123/mqdefault.jpg"


def test_dedupe_ids_keeps_first_occurrence():
    assert dedupe_ids([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_dedupe_ids_empty():
    assert dedupe_ids([]) == []
