"""
Tests for the markup helpers used by widgets
"""

from markupsafe import Markup

from app.fields.html import attrs, option, tag


class TestTag:
    """Test element rendering"""

    def test_name_attribute(self):
        assert tag("input", type="text", name="title") == '<input type="text" name="title">'
        assert tag("select", "", name="status") == '<select name="status"></select>'

    def test_tag_name_attribute_keyword(self):
        assert tag("meta", tag_name="x") == '<meta tag-name="x">'

    def test_content_escaped(self):
        assert tag("p", "<b>x</b>") == "<p>&lt;b&gt;x&lt;/b&gt;</p>"
        assert tag("p", Markup("<b>x</b>")) == "<p><b>x</b></p>"

    def test_list_content(self):
        assert tag("div", [tag("span", "a"), "&"]) == "<div><span>a</span>&amp;</div>"

    def test_option(self):
        assert option("a", "Apple", selected=True) == '<option value="a" selected>Apple</option>'


class TestAttrs:
    """Test attribute rendering"""

    def test_class_and_dashes(self):
        assert attrs(class_=["a", "", "b"], data_widget="x") == ' class="a b" data-widget="x"'

    def test_boolean_and_none(self):
        assert attrs(required=True, disabled=False, title=None) == " required"

    def test_values_escaped(self):
        assert attrs(title='"quoted"') == ' title="&#34;quoted&#34;"'
