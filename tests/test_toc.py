from journal.markdown.toc import extract_toc_from_html


def test_nested_headings():
    html = (
        '<h1 id="intro">Intro</h1>'
        '<h2 id="setup">Setup</h2>'
        '<h3 id="deps">Dependencies</h3>'
        '<h2 id="usage">Usage</h2>'
        '<h1 id="end">End</h1>'
    )
    toc = extract_toc_from_html(html)

    assert [node["id"] for node in toc] == ["intro", "end"]
    intro = toc[0]
    assert [child["title"] for child in intro["children"]] == ["Setup", "Usage"]
    assert intro["children"][0]["children"][0] == {
        "level": 3,
        "id": "deps",
        "title": "Dependencies",
        "children": [],
    }


def test_missing_id_falls_back_to_slug():
    toc = extract_toc_from_html("<h2>Getting Started Fast</h2>")
    assert toc[0]["id"] == "getting-started-fast"


def test_skips_empty_headings():
    assert extract_toc_from_html("<h2></h2><p>text</p>") == []


def test_empty_html():
    assert extract_toc_from_html("") == []
