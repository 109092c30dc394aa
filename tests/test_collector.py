import base64
import io

import pytest
from PIL import Image

from roastify_collector import (
    EncodedAttachment,
    InputCollector,
    UploadedFile,
    encode_all,
    encode_for_transport,
    guess_mime_type,
    is_accepted_mime,
)
from roastify_state import RoastifyStore


def upload(name, mime_type="image/jpeg", data=None):
    return UploadedFile(name=name, data=data or name.encode(), mime_type=mime_type)


def png_bytes(width=4, height=3):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "red").save(buffer, format="PNG")
    return buffer.getvalue()


def test_accepts_media_in_order():
    collector = InputCollector()

    added = collector.accept_files([
        upload("selfie.jpg"),
        upload("rant.mp3", "audio/mpeg"),
        upload("dance.mp4", "video/mp4"),
    ])

    assert [a.name for a in added] == ["selfie.jpg", "rant.mp3", "dance.mp4"]
    assert [a.name for a in collector.attachments] == ["selfie.jpg", "rant.mp3", "dance.mp4"]
    assert len(collector.previews) == 3
    for attachment in collector.attachments:
        assert attachment.preview_handle.startswith("preview://")
        assert collector.previews.resolve(attachment.preview_handle) is attachment.raw_file


def test_rejects_non_media():
    collector = InputCollector()

    added = collector.accept_files([upload("notes.pdf", "application/pdf"), upload("cat.png", "image/png")])

    assert [a.name for a in added] == ["cat.png"]
    assert len(collector) == 1


def test_remove_middle_attachment_keeps_order_and_releases_handle():
    collector = InputCollector()
    collector.accept_files([upload("a.jpg"), upload("b.jpg"), upload("c.jpg")])
    doomed = collector.attachments[1]

    removed = collector.remove_attachment(1)

    assert removed == doomed
    assert [a.name for a in collector.attachments] == ["a.jpg", "c.jpg"]
    assert doomed.preview_handle not in collector.previews
    assert len(collector.previews) == 2


@pytest.mark.parametrize("index", [-1, 3, 99])
def test_remove_out_of_range(index):
    collector = InputCollector()
    collector.accept_files([upload("a.jpg"), upload("b.jpg"), upload("c.jpg")])

    with pytest.raises(IndexError):
        collector.remove_attachment(index)

    assert len(collector) == 3


def test_clear_releases_everything():
    collector = InputCollector()
    collector.accept_files([upload("a.jpg"), upload("b.jpg")])

    collector.clear()

    assert collector.attachments == []
    assert len(collector.previews) == 0


def test_attachment_list_is_a_copy():
    collector = InputCollector()
    collector.accept_files([upload("a.jpg")])

    collector.attachments.clear()

    assert len(collector) == 1


def test_publishes_attachment_names():
    store = RoastifyStore()
    collector = InputCollector(store=store)

    collector.accept_files([upload("a.jpg"), upload("b.mp3", "audio/mpeg")])
    assert store.state.attachment_names == ("a.jpg", "b.mp3")

    collector.remove_attachment(0)
    assert store.state.attachment_names == ("b.mp3",)


async def test_encode_for_transport_builds_data_uri():
    collector = InputCollector()
    [attachment] = collector.accept_files([upload("clip.wav", "audio/wav", b"RIFFdata")])

    encoded = await encode_for_transport(attachment)

    assert encoded == EncodedAttachment(
        data="data:audio/wav;base64," + base64.b64encode(b"RIFFdata").decode(),
        mime_type="audio/wav",
    )


async def test_encode_all_keeps_order():
    collector = InputCollector()
    collector.accept_files([
        upload("a.jpg", data=b"first"),
        upload("b.mp3", "audio/mpeg", b"second"),
        upload("c.mp4", "video/mp4", b"third"),
    ])

    encoded = await encode_all(collector.attachments)

    assert [e.mime_type for e in encoded] == ["image/jpeg", "audio/mpeg", "video/mp4"]
    assert [base64.b64decode(e.data.split(",", 1)[1]) for e in encoded] == [b"first", b"second", b"third"]


async def test_encode_all_empty():
    assert await encode_all([]) == []


def test_guess_mime_type():
    assert guess_mime_type("selfie.jpg") == "image/jpeg"
    assert guess_mime_type("song.mp3") == "audio/mpeg"
    assert guess_mime_type("mystery", b"\x89PNG\r\n\x1a\n....") == "image/png"
    assert guess_mime_type("mystery", b"\xff\xd8\xff\xe0") == "image/jpeg"
    assert guess_mime_type("mystery", b"hello") == "application/octet-stream"


def test_is_accepted_mime():
    assert is_accepted_mime("image/png")
    assert is_accepted_mime("VIDEO/MP4")
    assert not is_accepted_mime("text/plain")
    assert not is_accepted_mime("")


def test_accept_paths(tmp_path):
    image_path = tmp_path / "outfit.png"
    image_path.write_bytes(png_bytes())
    missing = tmp_path / "ghost.jpg"

    collector = InputCollector()
    added = collector.accept_paths([str(image_path), str(missing)])

    assert [a.name for a in added] == ["outfit.png"]
    assert added[0].mime_type == "image/png"


def test_describe_image_includes_size():
    collector = InputCollector()
    [attachment] = collector.accept_files([upload("cat.png", "image/png", png_bytes(8, 6))])

    assert "8x6" in collector.describe(attachment)


def test_describe_broken_image():
    collector = InputCollector()
    [attachment] = collector.accept_files([upload("fake.png", "image/png", b"not an image")])

    assert "unreadable" in collector.describe(attachment)


def test_describe_audio():
    collector = InputCollector()
    [attachment] = collector.accept_files([upload("rant.mp3", "audio/mpeg", b"x" * 2048)])

    assert collector.describe(attachment) == "rant.mp3 (audio/mpeg, 2 KB)"
