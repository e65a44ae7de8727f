"""
eventually: lazy element locators, a name-keyed command registry and a
bounded retry loop for testing asynchronously-changing documents.

    from eventually import Session, visible, text, texts_in_any_order
    from eventually.backends import InMemoryDocument, node

    doc = InMemoryDocument(node("ul", "", node("li", "Themes"), node("li", "v8"), id="menu"))
    session = Session(doc)
    session.element("#menu").find("li", 1).should(visible, text("v8"))
    session.all("#menu li").should(texts_in_any_order("he", "8"))
"""

from .collection_conditions import (
    CollectionCondition,
    empty,
    exact_texts,
    size,
    size_greater_than,
    texts,
    texts_in_any_order,
)
from .commands import (
    MISSING,
    Command,
    CommandCall,
    CommandResult,
    FatalFailure,
    FunctionCommand,
    RetryableFailure,
    Success,
    register_default_commands,
)
from .conditions import (
    Condition,
    ConditionResult,
    Verdict,
    absent,
    attribute,
    css_class,
    exact_text,
    exist,
    hidden,
    normalize_text,
    not_,
    text,
    visible,
)
from .config import Configuration, get_config, set_config
from .dispatcher import FATAL_ERRORS, PollState, RetryDispatcher, classify
from .element import Element, ElementsCollection
from .errors import (
    ElementNotInteractableError,
    EngineError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    NotFoundError,
    PredicateNotSatisfiedError,
    RemoteEvaluationError,
    StaleElementError,
    UnknownOperationError,
    WaitTimeoutError,
)
from .failure_artifacts import (
    FailureArtifacts,
    FailureArtifactsOptions,
    FailureReporter,
    RedactionContext,
    RedactionResult,
)
from .locators import CollectionChain, LocatorChain, resolve
from .models import AttemptRecord, WaitOptions
from .registry import CommandRegistry, default_registry
from .session import Session

__version__ = "0.1.0"

__all__ = [
    # Locators
    "LocatorChain",
    "CollectionChain",
    "resolve",
    # Commands / registry
    "Command",
    "CommandCall",
    "CommandResult",
    "FunctionCommand",
    "Success",
    "RetryableFailure",
    "FatalFailure",
    "MISSING",
    "CommandRegistry",
    "default_registry",
    "register_default_commands",
    # Dispatcher
    "RetryDispatcher",
    "PollState",
    "classify",
    "FATAL_ERRORS",
    # Conditions
    "Condition",
    "ConditionResult",
    "Verdict",
    "normalize_text",
    "visible",
    "hidden",
    "exist",
    "absent",
    "text",
    "exact_text",
    "attribute",
    "css_class",
    "not_",
    "CollectionCondition",
    "texts_in_any_order",
    "texts",
    "exact_texts",
    "size",
    "size_greater_than",
    "empty",
    # Surface
    "Session",
    "Element",
    "ElementsCollection",
    # Config / models
    "Configuration",
    "get_config",
    "set_config",
    "WaitOptions",
    "AttemptRecord",
    # Failure reporting
    "FailureReporter",
    "FailureArtifacts",
    "FailureArtifactsOptions",
    "RedactionContext",
    "RedactionResult",
    # Errors
    "EngineError",
    "UnknownOperationError",
    "InvalidArgumentError",
    "NotFoundError",
    "IndexOutOfRangeError",
    "StaleElementError",
    "ElementNotInteractableError",
    "RemoteEvaluationError",
    "PredicateNotSatisfiedError",
    "WaitTimeoutError",
]
