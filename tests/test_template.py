import pytest

from licensefile.canonical import LicenseFields
from licensefile.errors import TemplateError
from licensefile.template import DEFAULT_TEMPLATE, render, render_fields, template_fields


def test_default_template_is_four_line_layout() -> None:
    assert DEFAULT_TEMPLATE.split("\n") == [
        "====BEGIN LICENSE====",
        "{{string}}",
        "{{serial}}",
        "=====END LICENSE=====",
    ]


def test_render_bare_string_with_default_template() -> None:
    artifact = render(DEFAULT_TEMPLATE, "data string", "U0VSSUFM")
    assert artifact == "====BEGIN LICENSE====\ndata string\nU0VSSUFM\n=====END LICENSE====="


def test_render_is_raw_without_html_escaping() -> None:
    fields = LicenseFields.from_pairs([("owner", "<Tom & Jerry's \"Co\">")])
    template = "{{owner}}|{{&owner}}|{{{owner}}}|{{ serial }}"
    expected = "<Tom & Jerry's \"Co\">|<Tom & Jerry's \"Co\">|<Tom & Jerry's \"Co\">|sig+/="
    assert render(template, fields, "sig+/=") == expected


def test_substituted_values_are_not_rescanned() -> None:
    fields = LicenseFields.from_pairs([("a", "{{serial}}")])
    assert render("{{a}}:{{serial}}", fields, "S") == "{{serial}}:S"


def test_unresolved_placeholder_renders_empty_by_default() -> None:
    fields = LicenseFields.from_pairs([("name", "Acme")])
    assert render("{{name}}/{{email}}/{{serial}}", fields, "S") == "Acme//S"


def test_strict_mode_rejects_unresolved_placeholders() -> None:
    fields = LicenseFields.from_pairs([("name", "Acme")])
    with pytest.raises(TemplateError, match="email, expires"):
        render("{{name}}{{email}}{{expires}}{{serial}}", fields, "S", strict=True)


def test_mapping_data_with_default_template_leaves_data_line_empty() -> None:
    fields = LicenseFields.from_pairs([("data", "hello")])
    assert render(DEFAULT_TEMPLATE, fields, "S").split("\n")[1] == ""


def test_template_fields_in_first_appearance_order() -> None:
    template = "{{&b}} {{a}} {{{b}}} {{serial}} {{ c }}"
    assert template_fields(template) == ["b", "a", "serial", "c"]


def test_render_fields_injects_serial() -> None:
    assert render_fields("x", "S") == {"string": "x", "serial": "S"}
    fields = LicenseFields.from_pairs([("b", "2"), ("a", "1")])
    assert list(render_fields(fields, "S").items()) == [("b", "2"), ("a", "1"), ("serial", "S")]
