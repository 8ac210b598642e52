import pytest

from gofacade.errors import TagSyntaxError
from gofacade.go_ast import GoBasicLit, GoField, GoIdent
from gofacade.type_node import StructTag, Tag, parse_tags, quote, unquote


def field(tag=None):
    literal = None if tag is None else GoBasicLit("STRING", tag)
    return GoField([GoIdent("F")], GoIdent("int"), literal)


class TestParse:
    def test_pairs(self):
        tags = parse_tags('json:"name,omitempty" xml:"n"')
        assert [(tag.key, tag.name, tag.options) for tag in tags] == [
            ("json", "name", ["omitempty"]),
            ("xml", "n", []),
        ]

    def test_escapes_in_values(self):
        (tag,) = parse_tags(r'doc:"say \"hi\""')
        assert tag.name == 'say "hi"'

    def test_empty(self):
        assert parse_tags("") == []
        assert parse_tags("   ") == []

    @pytest.mark.parametrize(
        "text",
        ['json:name', ':"x"', 'json "x"', 'json:"unterminated', 'json'],
    )
    def test_malformed(self, text):
        with pytest.raises(TagSyntaxError):
            parse_tags(text)

    def test_unquote(self):
        assert unquote("`a:\"1\"`") == 'a:"1"'
        assert unquote(r'"a:\"1\"\t\x41\u00e9\101"') == 'a:"1"\tAéA'
        with pytest.raises(TagSyntaxError):
            unquote('"a')
        with pytest.raises(TagSyntaxError):
            unquote(r'"\q"')

    def test_quote(self):
        assert quote('a:"1"') == r'"a:\"1\""'
        assert unquote(quote('back\\slash "q"\n')) == 'back\\slash "q"\n'


class TestStructTag:
    def test_get(self):
        tags = StructTag(field('`json:"name,omitempty" xml:"n"`'))
        tag, found = tags.get("json")
        assert found
        assert tag.value() == "name,omitempty"
        assert tag.has_option("omitempty")
        assert tags.get("yaml") == (None, False)
        assert tags.keys() == ["json", "xml"]

    def test_malformed_tag_is_empty(self):
        tags = StructTag(field("`json:name`"))
        assert tags.keys() == []
        assert str(tags) == ""

    def test_reparse(self):
        go_field = field('`a:"1"`')
        tags = StructTag(go_field)
        go_field.tag.value = '`b:"2" c:"3"`'
        tags.reparse()
        assert tags.keys() == ["b", "c"]

    def test_reparse_malformed_drops_tags(self):
        go_field = field('`a:"1"`')
        tags = StructTag(go_field)
        go_field.tag.value = "`a:1`"
        with pytest.raises(TagSyntaxError):
            tags.reparse()
        assert tags.keys() == []

    def test_set_sorts_and_writes_back(self):
        go_field = field()
        tags = StructTag(go_field)
        tags.set("b", "2")
        tags.set("a", "1")
        assert str(tags) == 'a:"1" b:"2"'
        assert go_field.tag.value == '`a:"1" b:"2"`'

    def test_set_replaces(self):
        go_field = field('`json:"old" xml:"x"`')
        tags = StructTag(go_field)
        tags.set("json", "new,omitempty")
        assert str(tags) == 'json:"new,omitempty" xml:"x"'
        tag, _ = tags.get("json")
        assert (tag.name, tag.options) == ("new", ["omitempty"])

    def test_set_invalid(self):
        go_field = field('`a:"1"`')
        tags = StructTag(go_field)
        for key in ["", "two words", 'quo"te', "co:lon"]:
            with pytest.raises(TagSyntaxError):
                tags.set(key, "v")
        with pytest.raises(TagSyntaxError):
            tags.set("b", "line\nbreak")
        assert tags.keys() == ["a"]
        assert go_field.tag.value == '`a:"1"`'

    def test_backquote_in_value(self):
        go_field = field()
        tags = StructTag(go_field)
        tags.set("doc", "a`b")
        assert go_field.tag.value == r'"doc:\"a`b\""'
        assert unquote(go_field.tag.value) == str(tags)

    def test_delete(self):
        go_field = field('`a:"1" b:"2" c:"3"`')
        tags = StructTag(go_field)
        tags.delete("a", "c", "missing")
        assert str(tags) == 'b:"2"'
        tags.delete("b")
        assert tags.keys() == []
        assert go_field.tag is None

    def test_options(self):
        go_field = field('`json:"name"`')
        tags = StructTag(go_field)
        tags.add_options("json", "omitempty", "string", "omitempty")
        assert go_field.tag.value == '`json:"name,omitempty,string"`'
        tags.delete_options("json", "string")
        assert str(tags) == 'json:"name,omitempty"'
        # Unknown keys are left alone
        tags.add_options("xml", "attr")
        assert tags.keys() == ["json"]

    def test_tags_copy(self):
        tags = StructTag(field('`a:"1"`'))
        tags.tags().append(Tag("b", "2"))
        assert tags.keys() == ["a"]
        assert str(Tag("k", "v", ["o"])) == 'k:"v,o"'
