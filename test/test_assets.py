"""
Tests for AssetCollection
"""

from app.fields.assets import AssetCollection


class TestAssetCollection:
    """Test ordering, deduplication and merging"""

    def test_insertion_order_and_duplicates(self):
        assets = AssetCollection()
        assets.add_css("/b.css", "/a.css", "/b.css")
        assets.add_js("/x.js")
        assets.add_js("/x.js")
        assert assets.css_files == ["/b.css", "/a.css"]
        assert assets.js_files == ["/x.js"]
        assert len(assets) == 3

    def test_empty_values_ignored(self):
        assets = AssetCollection()
        assets.add_css("")
        assets.add_init_script("   ")
        assert assets.is_empty

    def test_merge_keeps_first_position(self):
        first = AssetCollection(css=["/a.css"], js=["/a.js"])
        second = AssetCollection(css=["/b.css", "/a.css"], init_scripts=["init();"])
        first.merge(second)
        assert first.css_files == ["/a.css", "/b.css"]
        assert first.init_scripts == ["init();"]

    def test_merge_is_idempotent(self):
        base = AssetCollection(css=["/a.css"], js=["/a.js"], init_scripts=["a();"])
        other = AssetCollection(css=["/b.css"], js=["/a.js", "/b.js"], init_scripts=["b();"])
        once = base.copy().merge(other)
        twice = base.copy().merge(other).merge(other)
        assert once == twice

    def test_merge_into_self(self):
        assets = AssetCollection(css=["/a.css"])
        assert assets.merge(assets) is assets
        assert assets.css_files == ["/a.css"]

    def test_copy_is_independent(self):
        original = AssetCollection(css=["/a.css"])
        clone = original.copy()
        clone.add_css("/b.css")
        assert original.css_files == ["/a.css"]


class TestOutput:
    """Test tag rendering and serialization"""

    def test_render_tags(self):
        assets = AssetCollection(css=["/a.css"], js=["/a.js"], init_scripts=["start();"])
        html = str(assets.render())
        assert '<link rel="stylesheet" href="/a.css">' in html
        assert '<script src="/a.js"></script>' in html
        assert "DOMContentLoaded" in html
        assert "start();" in html
        assert html.index("/a.css") < html.index("/a.js") < html.index("start();")

    def test_no_init_block_without_scripts(self):
        assert "DOMContentLoaded" not in str(AssetCollection(js=["/a.js"]).render())

    def test_paths_are_escaped(self):
        html = str(AssetCollection(css=['/a.css"><script>']).render_css_tags())
        assert "<script>" not in html

    def test_to_dict(self):
        assets = AssetCollection(css=["/a.css"], js=["/a.js"], init_scripts=["go();"])
        assert assets.to_dict() == {"css": ["/a.css"], "js": ["/a.js"], "init_scripts": ["go();"]}
