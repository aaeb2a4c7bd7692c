from testsuites.ui_testing.framework.element_resolver import ResolutionAttempt
from testsuites.ui_testing.framework.errors import (
    AuthenticationFailedError,
    ConfigurationError,
    ElementNotFoundError,
    ErrorCode,
    ErrorHandler,
    FrameworkError,
    PageLoadTimeoutError,
    PerformanceThresholdExceededError,
    StateTimeoutError,
)
from testsuites.ui_testing.framework.selector_strategies import SelectorKind, SelectorStrategies


STRATEGIES = SelectorStrategies(test_id="cart", css=".shopping_cart_link")

ATTEMPTS = (
    ResolutionAttempt(SelectorKind.TEST_ID, "cart", 1, 500, False, "TimeoutError: Timeout 500ms exceeded"),
    ResolutionAttempt(SelectorKind.CSS, ".shopping_cart_link", 2, 501, False, ""),
)


def test_element_not_found_message_lists_attempts_in_order():
    error = ElementNotFoundError(STRATEGIES, 1000, ATTEMPTS, context="SauceDemoInventoryPage")

    assert str(error).splitlines() == [
        "Element not found after 2 attempt(s) within 1000ms. Tried in order:",
        "  1. test_id='cart' -> TimeoutError: Timeout 500ms exceeded",
        "  2. css='.shopping_cart_link' -> failed",
    ]
    assert error.code is ErrorCode.ELEMENT_NOT_FOUND
    assert error.details["attempt_count"] == 2
    assert error.details["attempts"][1]["strategy"] == "css"


def test_to_dict_and_formatted_message():
    error = ElementNotFoundError(STRATEGIES, 1000, ATTEMPTS, context="SauceDemoInventoryPage")

    payload = error.to_dict()
    assert payload["name"] == "ElementNotFoundError"
    assert payload["code"] == "ELEMENT_NOT_FOUND"
    assert payload["context"] == "SauceDemoInventoryPage"
    assert payload["details"]["timeout"] == 1000
    assert error.formatted_message().startswith("ELEMENT_NOT_FOUND [SauceDemoInventoryPage]: Element not found")


def test_state_timeout_is_a_not_found_error():
    error = StateTimeoutError(STRATEGIES, "hidden", 3000, strategy=SelectorKind.CSS,
                              attempts=ATTEMPTS[1:], reason="TimeoutError: still visible")

    assert isinstance(error, ElementNotFoundError)
    assert error.code is ErrorCode.STATE_TIMEOUT
    assert str(error) == (
        "Element resolved via css but did not become 'hidden' within 3000ms "
        "(test_id='cart', css='.shopping_cart_link'): TimeoutError: still visible"
    )
    assert error.details["state"] == "hidden"
    assert error.details["strategy"] == "css"


def test_configuration_error_is_not_a_not_found_error():
    error = ConfigurationError("Selector strategy set has no usable selectors")

    assert not isinstance(error, ElementNotFoundError)
    assert ErrorHandler.get_severity(error) == "critical"
    assert not ErrorHandler.is_retryable(error)


def test_error_handler_classification():
    assert ErrorHandler.is_retryable(PageLoadTimeoutError("https://www.saucedemo.com", 30000))
    assert ErrorHandler.get_severity(AuthenticationFailedError("locked out")) == "critical"
    assert ErrorHandler.get_severity(PerformanceThresholdExceededError("page_load_time_ms", 12000, 10000)) == "high"
    assert ErrorHandler.get_severity(ElementNotFoundError(STRATEGIES, 1000, ATTEMPTS)) == "medium"


def test_wrap_classifies_foreign_exceptions():
    timeout = ErrorHandler.wrap(Exception("Timeout 30000ms exceeded"), context="LoginPage")
    network = ErrorHandler.wrap(Exception("net::ERR_CONNECTION_REFUSED"))
    other = ErrorHandler.wrap(ValueError("bad value"))

    assert timeout.code is ErrorCode.TIMEOUT_ERROR
    assert timeout.context == "LoginPage"
    assert ErrorHandler.is_retryable(timeout)
    assert network.code is ErrorCode.NETWORK_ERROR
    assert other.code is ErrorCode.VALIDATION_ERROR
    assert other.details["original_type"] == "ValueError"


def test_wrap_passes_framework_errors_through():
    error = ConfigurationError("bad config")

    wrapped = ErrorHandler.wrap(error, context="SauceDemoLoginPage")

    assert wrapped is error
    assert isinstance(wrapped, FrameworkError)
    assert wrapped.context == "SauceDemoLoginPage"
