"""Tests for the HTML heuristics."""

from godseye.html_utils import (
    densest_element_text,
    extract_embedded_json,
    extract_json_ld,
    meta_fallback,
    product_fields_from_embedded,
    product_fields_from_endpoint,
    product_fields_from_json_ld,
    selectors_fallback,
)


class TestJsonLd:
    """JSON-LD Product detection."""

    def test_product_node_found(self, json_ld_html):
        data = extract_json_ld(json_ld_html)
        assert data is not None
        assert data["name"] == "LD Widget"

    def test_array_payload(self):
        html = """<script type="application/ld+json">
        [{"@type": "BreadcrumbList"}, {"@type": "Product", "name": "Array Widget"}]
        </script>"""
        assert extract_json_ld(html) == {"@type": "Product", "name": "Array Widget"}

    def test_type_as_list(self):
        html = """<script type="application/ld+json">
        {"@type": ["Product", "Thing"], "name": "Listed Type"}
        </script>"""
        assert extract_json_ld(html)["name"] == "Listed Type"

    def test_graph_payload(self):
        html = """<script type="application/ld+json">
        {"@context": "https://schema.org", "@graph": [
          {"@type": "WebPage", "name": "Page"},
          {"@type": "Product", "name": "Graph Widget", "description": "From the graph."}
        ]}
        </script>"""
        data = extract_json_ld(html)
        assert data is not None
        assert product_fields_from_json_ld(data) == ("Page", "From the graph.")

    def test_invalid_json_skipped(self):
        html = """<script type="application/ld+json">{not json</script>
        <script type="application/ld+json">{"@type": "Product", "name": "Valid"}</script>"""
        assert extract_json_ld(html)["name"] == "Valid"

    def test_no_product(self):
        html = '<script type="application/ld+json">{"@type": "Organization"}</script>'
        assert extract_json_ld(html) is None


class TestEmbeddedJson:
    """Product objects inside inline scripts."""

    def test_object_around_product_marker(self):
        html = """<script>
        window.analytics = {"page": "pdp", "tracking": true};
        window.product = {"@type": "Product", "name": "Embedded Widget", "description": "<p>Inline description</p>", "price": 10};
        </script>"""
        data = extract_embedded_json(html)
        assert data is not None
        assert data["name"] == "Embedded Widget"
        assert product_fields_from_embedded(data) == ("Embedded Widget", "Inline description")

    def test_bare_keys_repaired(self):
        html = """<script>
        var meta = {product: {title: "Bare Key Widget", sku: "BK-1", vendor: "Acme"}};
        </script>"""
        data = extract_embedded_json(html)
        assert data == {"product": {"title": "Bare Key Widget", "sku": "BK-1", "vendor": "Acme"}}
        assert product_fields_from_embedded(data) == ("Bare Key Widget", None)

    def test_single_quoted_js_literal(self):
        html = (
            "<script>var product = {'@type': 'Product', name: 'Widget', "
            "description: 'A widget that is nice', price: 10};</script>"
        )
        data = extract_embedded_json(html)
        assert data == {
            "@type": "Product",
            "name": "Widget",
            "description": "A widget that is nice",
            "price": 10,
        }
        assert product_fields_from_embedded(data) == ("Widget", "A widget that is nice")

    def test_short_or_unrelated_scripts_ignored(self):
        html = """<script>var x = {"price": 1};</script>
        <script>var config = {"theme": "dark", "locale": "en-US", "analytics": "enabled"};</script>"""
        assert extract_embedded_json(html) is None


class TestSelectorsFallback:
    def test_title_and_description(self, json_ld_html):
        assert selectors_fallback(json_ld_html) == (
            "DOM Widget Title",
            "A description that lives in the DOM.",
        )

    def test_short_values_rejected(self):
        html = '<h1>Hi</h1><div class="description">Too short</div>'
        assert selectors_fallback(html) == (None, None)

    def test_falls_through_selector_list(self):
        html = """<h1 class="title">Generic Title Widget</h1>
        <div class="product-summary">Summary text for the product.</div>"""
        assert selectors_fallback(html) == ("Generic Title Widget", "Summary text for the product.")

    def test_description_from_content_attribute(self):
        html = '<meta itemprop="description" content="Described via itemprop content.">'
        assert selectors_fallback(html) == (None, "Described via itemprop content.")


class TestMetaFallback:
    def test_open_graph(self, meta_only_html):
        assert meta_fallback(meta_only_html) == ("Acme Widget", "A great widget for everyone")

    def test_title_and_h2(self):
        html = "<html><head><title>  Page Title  </title></head><body><h2>Sub heading</h2></body></html>"
        assert meta_fallback(html) == ("Page Title", "Sub heading")

    def test_empty_content_falls_through(self):
        html = '<meta property="og:title" content=""><meta name="twitter:title" content="Twitter Title">'
        assert meta_fallback(html) == ("Twitter Title", None)

    def test_nothing_found(self):
        assert meta_fallback("<html><body><p>x</p></body></html>") == (None, None)


class TestDensestElement:
    def test_picks_content_block(self, densest_html):
        text = densest_element_text(densest_html)
        assert text.split("\n") == [
            "Acme Widget",
            "Hand-built from recycled aluminium.",
            "Fits every standard mount.",
        ]

    def test_skips_link_heavy_blocks(self):
        links = "\n".join(f'<a href="/c{i}">Category number {i}</a>' for i in range(12))
        html = f"""<body>
<div class="menu">
{links}
</div>
<div class="copy">
<p>Short copy</p>
</div>
</body>"""
        assert densest_element_text(html) == "Short copy"

    def test_skips_header_content(self):
        html = """<body>
<header><div>A very long header banner text that should never win</div></header>
<section>Real content</section>
</body>"""
        assert densest_element_text(html) == "Real content"

    def test_strips_scripts_and_buttons(self):
        html = """<body>
<div>
Product copy
<button>Add to cart and get a free thing today</button>
<script>var tracking = "lots of script text";</script>
</div>
</body>"""
        assert densest_element_text(html) == "Product copy"

    def test_body_text_when_no_blocks(self):
        assert densest_element_text("<body><span>Just a span</span></body>") == "Just a span"


class TestFieldPickers:
    def test_endpoint_shopify_js(self):
        data = {"title": "Shopify Widget", "body_html": "<p>Rich <b>text</b></p>"}
        assert product_fields_from_endpoint(data) == ("Shopify Widget", "Rich text")

    def test_endpoint_nested_product(self):
        data = {"product": {"title": "Nested Widget", "description": "Nested description"}}
        assert product_fields_from_endpoint(data) == ("Nested Widget", "Nested description")

    def test_endpoint_empty(self):
        assert product_fields_from_endpoint({"variants": []}) == (None, None)

    def test_json_ld_title_key(self):
        assert product_fields_from_json_ld({"title": "Titled", "description": "Desc"}) == ("Titled", "Desc")
