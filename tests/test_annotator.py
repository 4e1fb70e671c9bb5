import pytest

from md_styleguide.pipeline.annotator import Annotator, heading_slug
from md_styleguide.pipeline.nodes import (
    ArticleNode,
    CategoryNode,
    DefinitionNode,
    ExampleNode,
    FileNode,
    HtmlNode,
    ParagraphNode,
    PriorityNode,
    SectionNode,
)
from md_styleguide.schemas import RawComment


def test_h1_without_slash_emits_empty_article(annotator):
    nodes = annotator.annotate_markdown("# Buttons\n")
    assert nodes == [CategoryNode("Buttons"), ArticleNode("")]


def test_h1_splits_category_and_articles(annotator):
    nodes = annotator.annotate_markdown("# Buttons / Primary / Large\n")
    assert nodes == [
        CategoryNode("Buttons"),
        ArticleNode("Primary"),
        ArticleNode("Large"),
    ]


def test_h1_escaped_slash_does_not_split(annotator):
    nodes = annotator.annotate_markdown("# Either\\/Or\n")
    assert nodes == [CategoryNode("Either/Or"), ArticleNode("")]


def test_other_headings_get_slug_ids(annotator):
    (node,) = annotator.annotate_markdown("## Usage Notes\n")
    assert isinstance(node, HtmlNode)
    assert 'id="usage-notes"' in node.html
    assert 'href="#usage-notes"' in node.html
    assert "sg-heading-2" in node.html


def test_header_prefix_is_prepended():
    (node,) = Annotator(header_prefix="sg-").annotate_markdown("### Details\n")
    assert 'id="sg-details"' in node.html


def test_second_h1_is_nested_heading(annotator):
    nodes = annotator.annotate_markdown("# Buttons\n\n# Variants\n")
    assert nodes[:2] == [CategoryNode("Buttons"), ArticleNode("")]
    assert isinstance(nodes[2], HtmlNode)
    assert "sg-heading-nested" in nodes[2].html
    assert len([n for n in nodes if isinstance(n, CategoryNode)]) == 1


@pytest.mark.parametrize(
    "text,expected",
    [
        ("<code>@mixin()</code>", "mixin"),
        ("Hello, World!", "hello-world"),
        ("$$var Names", "var-names"),
    ],
)
def test_heading_slug(text, expected):
    assert heading_slug(text) == expected


def test_example_code_is_kept_verbatim(annotator):
    nodes = annotator.annotate_markdown(
        "```html_example\n<button class=\"btn\">Go</button>\n```\n"
    )
    assert nodes == [ExampleNode('<button class="btn">Go</button>')]


def test_other_code_is_highlighted(annotator):
    (node,) = annotator.annotate_markdown("```css\n.btn { color: red; }\n```\n")
    assert isinstance(node, HtmlNode)
    assert "sg-codeblock" in node.html
    assert "<span" in node.html


@pytest.mark.parametrize(
    "span,ref_id,css",
    [
        ("$$primary-color", "variable-primary-color", "sg-global-variable"),
        ("darken()", "function-darken", "sg-global-function"),
        ("@button-size()", "mixin-button-size", "sg-global-mixin"),
    ],
)
def test_codespan_references(annotator, span, ref_id, css):
    out = annotator.codespan(span)
    assert f'id="{ref_id}"' in out
    assert css in out
    assert "sg-global" in out


def test_codespan_variable_shows_single_dollar(annotator):
    assert 'data-code-id="$primary-color"' in annotator.codespan("$$primary-color")


def test_plain_codespan(annotator):
    assert annotator.codespan("color") == '<code class="sg-code sg-codespan">color</code>'


def test_codespans_inside_paragraphs_are_classified(annotator):
    (node,) = annotator.annotate_markdown("Use `darken()` for hover states.\n")
    assert isinstance(node, ParagraphNode)
    assert 'id="function-darken"' in node.html


@pytest.mark.parametrize(
    "text,expected",
    [
        ("@section: development", SectionNode("development")),
        ("@priority: 10", PriorityNode("10")),
        ("@order last", PriorityNode("last")),
        ("@file: ./scss/_forms.scss", FileNode("./scss/_forms.scss")),
        ("@category: Forms", CategoryNode("Forms")),
        ("@title: Inputs", ArticleNode("Inputs")),
    ],
)
def test_metadata_directives_become_markers(annotator, text, expected):
    assert annotator.annotate_markdown(text + "\n") == [expected]


def test_definition_directive(annotator):
    (node,) = annotator.annotate_markdown("@param $size: the button size\n")
    assert node == DefinitionNode("param", "$size: the button size")


def test_requires_description_is_a_code_reference(annotator):
    (node,) = annotator.annotate_markdown("@requires $$base-color\n")
    assert node.term == "requires"
    assert 'id="variable-base-color"' in node.description


def test_stacked_directives_each_become_definitions(annotator):
    nodes = annotator.annotate_markdown("@param $a: first\n@returns nothing\n")
    assert nodes == [
        DefinitionNode("param", "$a: first"),
        DefinitionNode("returns", "nothing"),
    ]


def test_directive_consumes_whole_paragraph(annotator):
    (node,) = annotator.annotate_markdown("@returns {Color}\nthe computed tint\n")
    assert node.term == "returns"
    assert "the computed tint" in node.description


def test_unknown_directive_is_plain_paragraph(annotator):
    assert annotator.annotate_markdown("@todo tidy this up\n") == [
        ParagraphNode("@todo tidy this up")
    ]


def test_directive_only_on_first_line(annotator):
    nodes = annotator.annotate_markdown("Intro line\n@section: development\n")
    assert len(nodes) == 1
    assert isinstance(nodes[0], ParagraphNode)


def test_annotate_appends_file_location(annotator):
    block = annotator.annotate(RawComment("./scss/_a.scss", "# A\n\nBody."))
    assert block.nodes[-1] == FileNode("./scss/_a.scss")
    assert block.first(CategoryNode) == CategoryNode("A")
    assert block.render_body() == "<p>Body.</p>"


def test_definitions_render_inside_one_list(annotator):
    block = annotator.annotate(
        RawComment("./a.scss", "# A\n\n@param $x: one\n\n@returns two\n")
    )
    body = block.render_body()
    assert body.count("<dl") == 1
    assert body.count("<dt") == 2


def test_marker_value_stops_at_end_of_line(annotator):
    nodes = annotator.annotate_markdown("@section: development\nprose after\n")
    assert nodes == [SectionNode("development"), ParagraphNode("prose after")]
