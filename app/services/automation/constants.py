"""Labels, markers, selectors and in-page scripts for the ordering site."""

# Visible labels of the controls the pipeline clicks
CHECKOUT_LABEL = "Checkout"
GUEST_CHECKOUT_LABEL = "Continue as Guest"
ADD_TO_CART_LABEL = "Add to Cart"
PLACE_ORDER_LABEL = "Place Order"
DEFAULT_OPTION_LABEL = "regular"

# Page text markers
CUSTOMIZATION_MARKERS = ["Add to Cart"]
REQUIRED_SELECTION_MARKERS = ["CHOOSE A MINIMUM OF", "REQUIRED"]
CHECKOUT_PAGE_MARKERS = ["Checkout", "Payment Details"]
CONFIRMATION_MARKERS = ["Order Placed", "Order Confirmed"]
CASH_PAYMENT_KEYWORDS = ["cash", "restaurant"]

# Element kinds searched by the text locator strategies
EXACT_TEXT_TAGS = ["div", "button", "a"]
CONTAINS_TEXT_TAGS = ["div", "button", "a", "span", "li", "label", "h3", "h4", "p"]
BUTTON_TAGS = ["button"]

# Structural fallbacks for the add-to-cart control, tried in order
ADD_TO_CART_SELECTORS = [
    'button[class*="add-to-cart"]',
    'button[class*="AddToCart"]',
    ".add-button",
    "button.teal",
    'button[type="submit"]',
]

# Guest form fields in fill order: (field name, placeholder fragment)
GUEST_FIELDS = [
    ("First name", "first name"),
    ("Last name", "last name"),
    ("Email", "email"),
    ("Phone", "phone"),
]
PLACEHOLDER_SELECTOR = 'input[placeholder*="{placeholder}" i]'
PICKUP_NOTES_SELECTOR = (
    'textarea, input[placeholder*="Pickup Notes" i], input[placeholder*="notes" i]'
)

# Confirmation fallbacks
ORDER_NUMBER_SENTINEL = "ORDER_PLACED_NO_NUMBER"
DEFAULT_PICKUP_ESTIMATE = "30-40 minutes"

# Snapshot labels, in pipeline order
SNAPSHOT_HOMEPAGE = "01-homepage"
SNAPSHOT_CART_FILLED = "02-cart-filled"
SNAPSHOT_CHECKOUT_MODAL = "03-checkout-modal"
SNAPSHOT_GUEST_FORM = "04-guest-form"
SNAPSHOT_GUEST_INFO_FILLED = "05-guest-info-filled"
SNAPSHOT_FINAL_CHECKOUT = "06-final-checkout"
SNAPSHOT_BEFORE_SUBMIT = "07-before-submit"
SNAPSHOT_CONFIRMATION = "08-confirmation"
SNAPSHOT_ERROR = "99-error-state"

# Browser session
BROWSER_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]
BROWSER_VIEWPORT = {"width": 1920, "height": 1080}
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# ----- In-page scripts -----

# Element whose whole trimmed text equals the label (case-insensitive)
EXACT_TEXT_SCRIPT = """
({ label, tags }) => {
    const wanted = label.trim().toLowerCase();
    return Array.from(document.querySelectorAll(tags.join(', '))).find(
        (el) => (el.textContent || '').trim().toLowerCase() === wanted
    ) || null;
}
"""

# Innermost element whose text contains the label (case-insensitive)
CONTAINS_TEXT_SCRIPT = """
({ label, tags, enabledOnly }) => {
    const wanted = label.trim().toLowerCase();
    const matches = Array.from(document.querySelectorAll(tags.join(', '))).filter(
        (el) => (el.textContent || '').toLowerCase().includes(wanted)
            && !(enabledOnly && el.disabled)
    );
    if (matches.length === 0) {
        return null;
    }
    return matches.reduce(
        (best, el) => (el.textContent.length < best.textContent.length ? el : best)
    );
}
"""

PAGE_TEXT_CONTAINS_SCRIPT = """
(markers) => {
    const text = document.body ? (document.body.textContent || '') : '';
    return markers.some((marker) => text.includes(marker));
}
"""

# "+" button sitting next to a numeric counter
INCREMENT_CONTROL_SCRIPT = """
() => Array.from(document.querySelectorAll('button')).find(
    (btn) => (btn.textContent || '').trim() === '+'
        && /\\d+/.test(btn.parentElement ? (btn.parentElement.textContent || '') : '')
) || null
"""

PAYMENT_RADIO_STATE_SCRIPT = """
(keywords) => {
    const radio = Array.from(document.querySelectorAll('input[type="radio"]')).find((r) => {
        const label = (r.parentElement ? (r.parentElement.textContent || '') : '').toLowerCase();
        return keywords.every((keyword) => label.includes(keyword));
    });
    return { found: Boolean(radio), checked: Boolean(radio && radio.checked) };
}
"""

SELECT_PAYMENT_RADIO_SCRIPT = """
(keywords) => {
    const radio = Array.from(document.querySelectorAll('input[type="radio"]')).find((r) => {
        const label = (r.parentElement ? (r.parentElement.textContent || '') : '').toLowerCase();
        return keywords.every((keyword) => label.includes(keyword));
    });
    if (!radio) {
        return false;
    }
    radio.click();
    return true;
}
"""
