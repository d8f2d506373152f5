import pytest

from auto_site_drafter.errors import ErrorCode, RequirementsValidationError
from auto_site_drafter.normalizer import RequirementsNormalizer, normalize_hex


def test_normalizer_accepts_camel_case_payload(aurora_payload):
    requirements = RequirementsNormalizer().normalize(aurora_payload)

    assert requirements.business_name == "Aurora Design Studio"
    assert requirements.target_audience == "Homeowners renovating their first home"
    assert [service.name for service in requirements.services][:2] == ["Full-home design", "Color consultation"]
    assert requirements.pages == ("Home",)
    assert str(requirements.email) == "hello@aurora.example"


def test_normalizer_fills_defaults_and_dedupes_pages():
    requirements = RequirementsNormalizer().normalize(
        {
            "businessName": "  Northwind   Plumbing ",
            "pages": ["Home", "home", " Services ", "", "Contact"],
            "features": ["Testimonials", "testimonials", " FAQ "],
        }
    )

    assert requirements.business_name == "Northwind Plumbing"
    assert requirements.pages == ("Home", "Services", "Contact")
    assert requirements.features == ("testimonials", "faq")
    assert requirements.tone
    assert requirements.target_audience
    assert requirements.location is None


def test_normalizer_defaults_to_single_home_page():
    requirements = RequirementsNormalizer().normalize({"businessName": "Solo"})

    assert requirements.pages == ("Home",)


def test_brand_colors_are_normalized(bistro_payload):
    requirements = RequirementsNormalizer().normalize(bistro_payload)

    assert requirements.brand.primary_color == "#1D3557"
    assert requirements.brand.style_keywords == ("rounded",)
    assert normalize_hex("abc") == "#AABBCC"


def test_invalid_brand_color_is_rejected():
    with pytest.raises(RequirementsValidationError) as excinfo:
        RequirementsNormalizer().normalize({"businessName": "Acme", "brand": {"primaryColor": "blue-ish"}})

    error = excinfo.value
    assert error.code is ErrorCode.INVALID_REQUIREMENTS
    assert error.stage == "validating"
    assert error.errors[0]["loc"] == ["brand", "primary_color"]
    assert error.http_status == 422


@pytest.mark.parametrize(
    "payload",
    [
        {"businessName": "   "},
        {"pages": ["Home"]},
        {"businessName": "Acme", "email": "not-an-email"},
    ],
)
def test_invalid_payloads_raise_validation_error(payload):
    with pytest.raises(RequirementsValidationError):
        RequirementsNormalizer().normalize(payload)


def test_long_page_lists_are_kept_in_order():
    names = ["Home", *(f"Location {number}" for number in range(1, 20))]

    requirements = RequirementsNormalizer().normalize({"businessName": "Acme", "pages": names})

    assert requirements.pages == tuple(names)


def test_normalize_is_idempotent(bistro_payload):
    normalizer = RequirementsNormalizer()
    first = normalizer.normalize(bistro_payload)

    assert normalizer.normalize(first) == first
