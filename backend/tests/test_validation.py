from backend.app.services.validation import (
    generate_slug,
    validate_email,
    validate_html_content,
    validate_landing_page_form,
    validate_meta_description,
    validate_og_image,
    validate_phone,
    validate_required,
    validate_slug,
    validate_status,
    validate_twitter_card,
    validate_url,
)

from conftest import make_page_payload


def test_slug_rules():
    assert validate_slug("cafe-noon") is None
    assert validate_slug("a1") is None
    assert validate_slug("") == "Slug is required"
    assert validate_slug(None) == "Slug is required"
    assert validate_slug("a") == "Slug must be at least 2 characters"
    assert validate_slug("x" * 51) == "Slug must not exceed 50 characters"
    assert validate_slug("x" * 50) is None
    assert validate_slug("Cafe-Noon") == "Slug must contain only lowercase letters, numbers, and hyphens"
    assert validate_slug("cafe noon") == "Slug must contain only lowercase letters, numbers, and hyphens"
    assert validate_slug("cafe-noon\n") == "Slug must contain only lowercase letters, numbers, and hyphens"
    assert validate_slug("-cafe") == "Slug cannot start or end with a hyphen"
    assert validate_slug("cafe-") == "Slug cannot start or end with a hyphen"


def test_generate_slug():
    assert generate_slug("Café Noon!") == "cafe-noon"
    assert generate_slug("  Shah's   Dry  Fruits -- Srinagar ") == "shahs-dry-fruits-srinagar"
    assert generate_slug("") == ""
    # the suggestion is not guaranteed valid
    assert validate_slug(generate_slug("!")) == "Slug is required"


def test_meta_description_bounds():
    assert validate_meta_description("") == "Meta description is required"
    assert validate_meta_description("x" * 19) == "Meta description must be at least 20 characters"
    assert validate_meta_description("x" * 20) is None
    assert validate_meta_description("x" * 160) is None
    assert validate_meta_description("x" * 161) == "Meta description must not exceed 160 characters"


def test_og_image_accepts_extension_or_allowed_host():
    allow = ["firebasestorage.googleapis.com"]
    assert validate_og_image("https://cdn.example.com/a.PNG", allow) is None
    assert validate_og_image("https://firebasestorage.googleapis.com/v0/b/x/o/img?alt=media", allow) is None
    assert validate_og_image("https://sub.firebasestorage.googleapis.com/img", allow) is None
    assert validate_og_image("", allow) == "Featured image URL is required"
    assert validate_og_image("not a url", allow) == "Featured image URL must be valid"
    assert validate_og_image("ftp://cdn.example.com/a.png", allow) == "Featured image URL must be valid"
    assert validate_og_image("https://cdn.example.com/page", allow).startswith("Image URL should be")
    assert validate_og_image("https://evilfirebasestorage.googleapis.com.example/x", allow).startswith(
        "Image URL should be"
    )


def test_html_content_is_trimmed_before_length_check():
    assert validate_html_content("") == "HTML content is required"
    assert validate_html_content("   <p>hi</p>   ") == "HTML content must be at least 10 characters"
    assert validate_html_content("<p>hello</p>") is None
    assert validate_html_content("x" * 1_000_001) == "HTML content exceeds maximum size"


def test_optional_fields():
    assert validate_email("") is None
    assert validate_email("a@b.co") is None
    assert validate_email("a@b") == "Invalid email format"
    assert validate_email("a b@c.de") == "Invalid email format"

    assert validate_phone(None) is None
    assert validate_phone("123456") == "Phone number must be at least 7 digits"
    assert validate_phone("1234567") is None
    assert validate_phone("1" * 21) == "Phone number must not exceed 20 characters"

    assert validate_url("") is None
    assert validate_url("https://cafenoon.in") is None
    assert validate_url("cafenoon.in") == "Invalid URL format"

    assert validate_status(None) is None
    assert validate_status("archived") is None
    assert validate_status("live").startswith("Status must be one of")

    assert validate_twitter_card("summary") is None
    assert validate_twitter_card("big").startswith("Twitter card must be one of")


def test_required_uses_label():
    assert validate_required("   ", "Business name") == "Business name is required"
    assert validate_required("x" * 501, "Meta title") == "Meta title must not exceed 500 characters"
    assert validate_required("Cafe Noon", "Business name") is None


def test_form_valid_payload_has_no_errors():
    assert validate_landing_page_form(make_page_payload()) == {}


def test_form_reports_first_error_per_field():
    data = make_page_payload(
        businessName="",
        slug="Bad Slug",
        metaDescription="short",
        ogImage="",
        htmlContent="<p>",
        businessEmail="nope",
        canonicalUrl="kashpages.in/x",
        status="live",
    )
    data.pop("ogTitle")
    errors = validate_landing_page_form(data)
    assert errors == {
        "businessName": "Business name is required",
        "ogTitle": "OG title is required",
        "slug": "Slug must contain only lowercase letters, numbers, and hyphens",
        "metaDescription": "Meta description must be at least 20 characters",
        "ogImage": "Featured image URL is required",
        "htmlContent": "HTML content must be at least 10 characters",
        "businessEmail": "Invalid email format",
        "canonicalUrl": "Invalid URL format",
        "status": "Status must be one of: draft, published, archived",
    }


REQUIRED = ["businessName", "businessCategory", "businessLocation", "metaTitle", "ogTitle", "ogDescription",
            "htmlContent"]


def test_missing_required_fields_are_reported_exactly():
    for field in REQUIRED:
        data = make_page_payload()
        data.pop(field)
        assert set(validate_landing_page_form(data)) == {field}, field

    data = make_page_payload(**{field: "" for field in REQUIRED})
    assert set(validate_landing_page_form(data)) == set(REQUIRED)


def test_generate_slug_is_idempotent():
    for title in ("Café Noon!", "  --Shah's  Dry Fruits--  ", "Hotel 5 Star", "a", ""):
        slug = generate_slug(title)
        assert generate_slug(slug) == slug
