from services.ux_audit_service.schemas.audit import PageType

RUBRICS: dict[str, str] = {
    PageType.HOMEPAGE.value: (
        "Value proposition above the fold, primary navigation clarity, hero CTA visibility, "
        "trust signals (reviews, badges, contact details), entry points into key categories."
    ),
    PageType.PLP.value: (
        "Filtering and sorting usability, product card consistency, price and availability visibility, "
        "pagination or infinite scroll behaviour, empty and zero-result states."
    ),
    PageType.PDP.value: (
        "Product imagery and zoom, price and variant selection clarity, add-to-cart prominence, "
        "shipping and returns information, reviews and social proof."
    ),
    PageType.BLOG.value: (
        "Readability and typography, content hierarchy with headings, author and date visibility, "
        "related content and internal links, newsletter or next-step CTAs."
    ),
}


def select_rubric(page_type: str | None) -> str:
    """Return the audit focal points for ``page_type``; unknown types get ``""``."""
    if not page_type:
        return ""
    return RUBRICS.get(page_type.strip(), "")
