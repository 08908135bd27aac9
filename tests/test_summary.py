from getlost_bundler.summary import extract_cover_image_data, extract_report_summary

LONG_VALUE = (
    "Contemporary romance with literary fiction elements, centred on grief, "
    "creative rivalry and second chances."
)


def test_summary_from_classification_block():
    html = f"""
    <div>
      <div class="text-sm font-medium">Genre Classification</div>
      <div class="text-sm text-gray-600">{LONG_VALUE}</div>
    </div>
    """
    assert extract_report_summary(html) == LONG_VALUE


def test_summary_from_overview_sentences():
    html = """
    <section id="overview">
      <h2>Overview</h2>
      <p>Classification: This novel is a contemporary romance about two writers who swap genres for a summer. It explores grief and second chances with humor and heart.</p>
      <script>var ignored = "classification";</script>
    </section>
    """
    summary = extract_report_summary(html)
    assert "two writers" in summary
    assert summary.endswith("heart.")
    assert "ignored" not in summary


def test_summary_from_overview_paragraph():
    paragraph = "A " + "very " * 30 + "long opening paragraph."
    html = f'<div id="overview"><h2>Overview</h2><p>Short.</p><p>{paragraph}</p></div>'
    assert extract_report_summary(html) == paragraph


def test_summary_from_summary_container():
    html = '<section class="executive-summary">A compact synopsis of the manuscript that runs past fifty characters.</section>'
    assert extract_report_summary(html).startswith("A compact synopsis")


def test_summary_missing():
    assert extract_report_summary(None) is None
    assert extract_report_summary("") is None
    assert extract_report_summary("<p>Too short.</p>") is None


def test_cover_image_data_skips_remote_images():
    html = (
        '<img src="https://cdn.example.com/logo.png">'
        '<img src="data:image/png;base64,AAAA">'
        '<img src="data:image/jpeg;base64,BBBB">'
    )
    assert extract_cover_image_data(html) == "data:image/png;base64,AAAA"
    assert extract_cover_image_data('<img src="cover.png">') is None
    assert extract_cover_image_data(None) is None
