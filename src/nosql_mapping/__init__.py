"""Derived-query object mapping for document databases.

Repository method names such as ``find_by_name_and_age_greater_than`` are
split into tokens; each token becomes a :class:`Condition` through the
token processor; conditions compile to MongoDB filters and run through a
blocking :class:`DocumentTemplate` or its Observable-based reactive wrapper.
"""

from __future__ import annotations

from .condition import CompositeCondition, Condition, Sort, and_, or_
from .connection import MongoConnectionManager
from .converters import (
    AttributeConverter,
    Converters,
    DecimalConverter,
    FunctionConverter,
    default_converters,
)
from .exceptions import (
    FieldNotFoundError,
    IdNotFoundError,
    MappingError,
    MethodQueryError,
    MongoConnectionError,
    MongoPersistenceError,
    MongoQueryError,
    NonUniqueResultError,
)
from .mapping import ClassMapping, ClassMappings, FieldMapping
from .method_query import MethodQuery, OrderToken, QueryAction
from .operators import ConditionOperator, Direction
from .processor import DocumentTokenProcessor, TokenProcessor
from .query import (
    DocumentDeleteQuery,
    DocumentQuery,
    MethodQueryTranslator,
    TranslatedQuery,
)
from .reactive import Observable, ReactiveDocumentTemplate, reactive_template
from .repository import DocumentRepository, ReactiveDocumentRepository
from .template import DocumentTemplate, MongoDocumentTemplate
from .tokens import MethodToken

__all__ = [
    # Conditions
    "Condition",
    "CompositeCondition",
    "ConditionOperator",
    "Direction",
    "Sort",
    "and_",
    "or_",
    # Tokens and method names
    "MethodToken",
    "MethodQuery",
    "OrderToken",
    "QueryAction",
    "TokenProcessor",
    "DocumentTokenProcessor",
    "MethodQueryTranslator",
    "TranslatedQuery",
    # Mapping
    "ClassMapping",
    "ClassMappings",
    "FieldMapping",
    "AttributeConverter",
    "Converters",
    "DecimalConverter",
    "FunctionConverter",
    "default_converters",
    # Queries and templates
    "DocumentQuery",
    "DocumentDeleteQuery",
    "DocumentTemplate",
    "MongoDocumentTemplate",
    "MongoConnectionManager",
    "Observable",
    "ReactiveDocumentTemplate",
    "reactive_template",
    "DocumentRepository",
    "ReactiveDocumentRepository",
    # Exceptions
    "MappingError",
    "FieldNotFoundError",
    "MethodQueryError",
    "IdNotFoundError",
    "NonUniqueResultError",
    "MongoPersistenceError",
    "MongoConnectionError",
    "MongoQueryError",
]
