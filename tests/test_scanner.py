from getlost_bundler.models import MediaKind
from getlost_bundler.scanner import scan, scan_images, scan_videos


def test_scan_images_finds_each_context():
    html = (
        '<img src="photo.jpg">'
        "<a href='gallery/large.PNG'>large</a>"
        '<div style="background-image: url(bg/hero.webp)"></div>'
        "<style>.x { background: url('icons/star.svg'); }</style>"
    )
    refs = scan_images(html)
    assert [ref.raw_path for ref in refs] == [
        "photo.jpg",
        "gallery/large.PNG",
        "bg/hero.webp",
        "icons/star.svg",
    ]
    assert [ref.kind for ref in refs] == [
        MediaKind.IMAGE,
        MediaKind.IMAGE,
        MediaKind.BACKGROUND,
        MediaKind.BACKGROUND,
    ]


def test_scan_images_deduplicates_by_first_occurrence():
    html = '<div style="background-image:url(a.png)"></div><img src="a.png"><img src="b.gif">'
    refs = scan_images(html)
    assert [ref.raw_path for ref in refs] == ["a.png", "b.gif"]
    assert refs[0].kind == MediaKind.BACKGROUND


def test_scan_images_skips_remote_and_inline_references():
    html = (
        '<img src="https://cdn.example.com/a.png">'
        '<img src="http://example.com/b.jpg">'
        '<img src="data:image/png;base64,AAAA.png">'
        '<img src="local.jpeg">'
    )
    assert [ref.raw_path for ref in scan_images(html)] == ["local.jpeg"]


def test_scan_videos_uses_video_extensions_only():
    html = '<video src="media/clip.mp4"></video><source src="trailer.webm"><img src="poster.png">'
    refs = scan_videos(html)
    assert [ref.raw_path for ref in refs] == ["media/clip.mp4", "trailer.webm"]
    assert all(ref.kind == MediaKind.VIDEO for ref in refs)


def test_scan_tolerates_malformed_markup():
    html = '<div <img src="broken.png" <p>unclosed <video src=\'x.mov\''
    assert [ref.raw_path for ref in scan(html)] == ["broken.png", "x.mov"]


def test_scan_returns_nothing_for_plain_text():
    assert scan("no media here") == []
