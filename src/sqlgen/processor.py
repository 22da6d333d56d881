# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Repository processor: generates one result per method of a repository class.

Usage::

    from sqlgen import RepositoryProcessor, native_query, sql_generator

    @sql_generator(entity=User, naming_strategy=NamingStrategy.SNAKE_CASE)
    class UserRepository:
        def find_by_email_and_active(self, email: str, active: bool) -> list[User]: ...

        def exists_by_email(self, email: str) -> bool: ...

        @native_query("SELECT * FROM users WHERE created_at > :since")
        def recent(self, since: datetime) -> list[User]: ...

    results = RepositoryProcessor().process(UserRepository)
    results["find_by_email_and_active"].plan.sql
    # SELECT * FROM users WHERE email = ? AND active = ?

Which methods are generated:

* every method carrying ``@native_query``;
* every stub method (body is ``...`` or ``pass``) whose name is not private,
  unless the class sets ``native_query_only=True`` or names no entity.

A failure while generating one method never stops the others: the method is
reported as :class:`~sqlgen.query.plan.Unsupported` with ``artifact=None``
and its original body is kept.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, get_type_hints

import structlog

from sqlgen.adapters.source.emitter import PythonSourceEmitter
from sqlgen.config.properties import GenerationProperties
from sqlgen.kernel.exceptions import GenerationIssue, UnknownFieldError, UnsupportedMethodPattern
from sqlgen.ports.emitter import CodeEmitter
from sqlgen.query.mapping import ResultMappingPlan, ResultMappingResolver, TypeRef, default_value_for
from sqlgen.query.params import ParameterBindingPlanner, ParameterInfo
from sqlgen.query.parser import MethodIntentParser, Operation, QueryMethodDescriptor
from sqlgen.query.plan import (
    Cardinality,
    Generated,
    GeneratedWithWarnings,
    GenerationResult,
    OperationKind,
    ParameterStyle,
    QueryExecutionPlan,
    Unsupported,
)
from sqlgen.query.raw import NativeQuery, RawQueryAnalyzer, get_native_query
from sqlgen.query.statement import EXISTS_FALLBACK_CHAIN, SqlStatementBuilder, has_key, update_set_fields
from sqlgen.schema.entity import EntitySchema
from sqlgen.schema.naming import NamingStrategy

logger = structlog.get_logger("sqlgen.processor")

GENERATOR_ATTR = "__sqlgen_generator__"

_OPERATION_KINDS: dict[Operation, OperationKind] = {
    Operation.FIND: OperationKind.SELECT,
    Operation.FIND_ALL: OperationKind.SELECT,
    Operation.COUNT: OperationKind.SELECT,
    Operation.EXISTS: OperationKind.SELECT,
    Operation.DELETE: OperationKind.DELETE,
    Operation.SAVE: OperationKind.INSERT,
    Operation.UPDATE: OperationKind.UPDATE,
}

# Return types assumed when a method has no return annotation.
_IMPLIED_RETURNS: dict[Operation, Any] = {
    Operation.COUNT: int,
    Operation.EXISTS: bool,
    Operation.DELETE: int,
    Operation.SAVE: None,
    Operation.UPDATE: None,
}


# ---------------------------------------------------------------------------
# Class decorator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeneratorOptions:
    """Per-class settings recorded by :func:`sql_generator`."""

    entity: type | None = None
    table_name: str | None = None
    naming_strategy: NamingStrategy | None = None
    native_query_only: bool = False
    primary_key: str | None = None


def sql_generator(
    entity: type | None = None,
    *,
    table_name: str | None = None,
    naming_strategy: NamingStrategy | str | None = None,
    native_query_only: bool = False,
    primary_key: str | None = None,
) -> Callable[[type], type]:
    """Mark a repository class for SQL generation.

    Args:
        entity: Entity class whose fields form the schema.
        table_name: Overrides the table name derived from the entity.
        naming_strategy: Column naming for this class; defaults to
            ``sqlgen.generation.naming-strategy``.
        native_query_only: Generate only ``@native_query`` methods.
        primary_key: Overrides the default ``id`` primary key.
    """
    options = GeneratorOptions(
        entity=entity,
        table_name=table_name,
        naming_strategy=NamingStrategy(naming_strategy) if naming_strategy is not None else None,
        native_query_only=native_query_only,
        primary_key=primary_key,
    )

    def decorator(cls: type) -> type:
        setattr(cls, GENERATOR_ATTR, options)
        return cls

    return decorator


@dataclass(frozen=True)
class GenerationContext:
    """Immutable inputs shared by every method of one class."""

    schema: EntitySchema
    naming_strategy: NamingStrategy
    class_name: str = ""
    native_query_only: bool = False
    strict: bool = False
    validate_sql: bool = True
    sql_dialect: str | None = None


# ---------------------------------------------------------------------------
# Processor
# ---------------------------------------------------------------------------


class RepositoryProcessor:
    """Generate SQL, execution plans and emitted bodies for repository classes."""

    def __init__(
        self,
        emitter: CodeEmitter | None = None,
        properties: GenerationProperties | None = None,
    ) -> None:
        self._emitter: CodeEmitter = emitter if emitter is not None else PythonSourceEmitter()
        self._properties = properties if properties is not None else GenerationProperties()
        self._parser = MethodIntentParser()
        self._builder = SqlStatementBuilder()
        self._analyzer = RawQueryAnalyzer()
        self._planner = ParameterBindingPlanner()
        self._resolver = ResultMappingResolver()

    def context_for(self, cls: type) -> GenerationContext:
        """Build the :class:`GenerationContext` for a ``@sql_generator`` class.

        Raises:
            ValueError: If *cls* is not decorated with ``@sql_generator``.
        """
        options: GeneratorOptions | None = getattr(cls, GENERATOR_ATTR, None)
        if options is None:
            raise ValueError(f"{cls.__name__} is not decorated with @sql_generator")

        strategy = options.naming_strategy or self._properties.naming_strategy
        if options.entity is not None:
            schema = EntitySchema.from_type(
                options.entity,
                strategy,
                table_name=options.table_name,
                primary_key=options.primary_key,
            )
        else:
            schema = EntitySchema(table_name=options.table_name or "", fields=(), primary_key=options.primary_key)

        return GenerationContext(
            schema=schema,
            naming_strategy=strategy,
            class_name=cls.__name__,
            native_query_only=options.native_query_only or options.entity is None,
            strict=self._properties.strict,
            validate_sql=self._properties.validate_sql,
            sql_dialect=self._properties.sql_dialect or None,
        )

    def process(self, cls: type) -> dict[str, GenerationResult]:
        """Generate every eligible method of *cls*, in declaration order.

        Raises:
            GenerationIssue: In strict mode, the first issue any method reports.
        """
        context = self.context_for(cls)
        results: dict[str, GenerationResult] = {}

        for name, func in self.candidate_methods(cls, context):
            try:
                result = self.generate(name, func, context)
            except Exception as exc:
                logger.error(
                    "method_generation_failed",
                    repository=context.class_name,
                    method=name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                result = Unsupported(method_name=name)

            for issue in result.issues:
                logger.warning(
                    "generation_issue",
                    repository=context.class_name,
                    method=name,
                    code=issue.code,
                    message=issue.message,
                )
            if context.strict and result.issues:
                raise result.issues[0]
            results[name] = result

        logger.info(
            "repository_generated",
            repository=context.class_name,
            table=context.schema.table_name,
            naming_strategy=context.naming_strategy.value,
            generated=sum(1 for r in results.values() if not isinstance(r, Unsupported)),
            unsupported=sum(1 for r in results.values() if isinstance(r, Unsupported)),
        )
        return results

    def candidate_methods(self, cls: type, context: GenerationContext) -> list[tuple[str, Callable[..., Any]]]:
        """Methods of *cls* that generation applies to, in declaration order."""
        candidates: list[tuple[str, Callable[..., Any]]] = []
        for attr_name, attr in vars(cls).items():
            if attr_name.startswith("_"):
                continue
            func = attr.__func__ if isinstance(attr, (staticmethod, classmethod)) else attr
            if not callable(func) or isinstance(func, type):
                continue
            if get_native_query(func) is not None:
                candidates.append((attr_name, func))
            elif not context.native_query_only and self._is_stub(func):
                candidates.append((attr_name, func))
        return candidates

    def generate(self, name: str, func: Callable[..., Any], context: GenerationContext) -> GenerationResult:
        """Generate a single method, dispatching on ``@native_query``."""
        contract = get_native_query(func)
        if contract is not None:
            return self.generate_native(name, func, contract, context)
        return self.generate_derived(name, func, context)

    # ------------------------------------------------------------------
    # Convention methods
    # ------------------------------------------------------------------

    def generate_derived(self, name: str, func: Callable[..., Any], context: GenerationContext) -> GenerationResult:
        """Generate a convention method such as ``find_by_email``."""
        descriptor = self._parser.parse(name)
        return_type = _return_annotation(func)

        schema = context.schema
        if descriptor.operation is Operation.UNKNOWN:
            return self._unsupported(name, return_type, "does not match any supported query prefix", context)
        if descriptor.operation is Operation.SAVE and not schema.fields:
            return self._unsupported(name, return_type, f"has no columns to insert into {schema.table_name}", context)
        if descriptor.operation is Operation.UPDATE and not update_set_fields(schema):
            return self._unsupported(name, return_type, f"has no columns to update in {schema.table_name}", context)

        issues: list[GenerationIssue] = list(self._unknown_fields(descriptor, schema, context))
        if descriptor.operation is Operation.DELETE and not descriptor.conditions:
            issues.append(
                UnsupportedMethodPattern(
                    f"Method '{name}' has no conditions and deletes every row of {schema.table_name}",
                    context={"method": name, "repository": context.class_name},
                )
            )
        params = self._planner.analyze(func)

        if descriptor.operation in (Operation.SAVE, Operation.UPDATE):
            bindings = self._entity_bindings(descriptor.operation, schema, params, issues)
        else:
            bindings, binding_issues = self._planner.plan_derived(descriptor, params)
            issues.extend(binding_issues)

        if return_type is inspect.Signature.empty and descriptor.operation in _IMPLIED_RETURNS:
            return_type = _IMPLIED_RETURNS[descriptor.operation]
        mapping, mapping_issues = self._resolver.resolve(return_type, method_name=name)
        issues.extend(mapping_issues)

        kind = _OPERATION_KINDS[descriptor.operation]
        cardinality = self._resolver.cardinality_for(mapping.target_type, kind)
        if descriptor.operation is Operation.EXISTS:
            cardinality = Cardinality.BOOLEAN
        elif descriptor.operation is Operation.COUNT and cardinality is not Cardinality.VOID:
            cardinality = Cardinality.SCALAR

        if descriptor.operation is Operation.EXISTS:
            return self._generate_exists(name, descriptor, bindings, mapping, issues, context)

        sql = self._builder.build(descriptor, schema, context.naming_strategy)
        plan = QueryExecutionPlan(
            sql=sql,
            operation_kind=kind,
            bindings=bindings,
            mapping=mapping,
            cardinality=cardinality,
            method_name=name,
        )
        artifact = self._emitter.emit_select(plan) if kind is OperationKind.SELECT else self._emitter.emit_update(plan)
        return _result(plan, artifact, issues)

    def _generate_exists(
        self,
        name: str,
        descriptor: QueryMethodDescriptor,
        bindings: tuple[ParameterInfo, ...],
        mapping: ResultMappingPlan,
        issues: list[GenerationIssue],
        context: GenerationContext,
    ) -> GenerationResult:
        """Try each EXISTS form in order until the emitter accepts one."""
        for form in EXISTS_FALLBACK_CHAIN:
            sql = self._builder.build_exists(descriptor, context.schema, context.naming_strategy, form)
            if sql is None:
                logger.warning("exists_literal_fallback", repository=context.class_name, method=name)
                return Unsupported(name, self._emitter.emit_literal(False, name), tuple(issues))

            plan = QueryExecutionPlan(
                sql=sql,
                operation_kind=OperationKind.SELECT,
                bindings=bindings,
                mapping=mapping,
                cardinality=Cardinality.BOOLEAN,
                method_name=name,
                count_as_boolean=form is not EXISTS_FALLBACK_CHAIN[0],
            )
            try:
                artifact = self._emitter.emit_select(plan)
            except Exception as exc:
                logger.info(
                    "exists_form_rejected",
                    repository=context.class_name,
                    method=name,
                    form=form.value,
                    error=str(exc),
                )
                continue
            return _result(plan, artifact, issues)

        # EXISTS_FALLBACK_CHAIN always ends with the literal form.
        raise AssertionError("EXISTS fallback chain exhausted")

    def _entity_bindings(
        self,
        operation: Operation,
        schema: EntitySchema,
        params: list[ParameterInfo],
        issues: list[GenerationIssue],
    ) -> tuple[ParameterInfo, ...]:
        if operation is Operation.SAVE:
            fields = schema.fields
        else:
            fields = update_set_fields(schema) + ((schema.primary_key,) if has_key(schema) else ())
        if len(params) != 1:
            issues.extend(self._planner.validate_positional(1, params))
        return self._planner.plan_entity([f for f in fields if f is not None], params[0] if params else None)

    def _unsupported(self, name: str, return_type: Any, reason: str, context: GenerationContext) -> Unsupported:
        """An :class:`Unsupported` result with a diagnostic body and one ``METHOD_001`` issue."""
        issue = UnsupportedMethodPattern(
            f"Method '{name}' {reason}",
            context={"method": name, "repository": context.class_name},
        )
        default = default_value_for(TypeRef.of(return_type))
        return Unsupported(name, self._emitter.emit_diagnostic(name, default), (issue,))

    @staticmethod
    def _unknown_fields(
        descriptor: QueryMethodDescriptor,
        schema: EntitySchema,
        context: GenerationContext,
    ) -> list[GenerationIssue]:
        if not schema.fields:
            return []
        return [
            UnknownFieldError(
                f"Field '{field}' is not declared on {schema.table_name}",
                context={"field": field, "table": schema.table_name, "repository": context.class_name},
            )
            for field in descriptor.fields
            if not schema.has_field(field)
        ]

    # ------------------------------------------------------------------
    # @native_query methods
    # ------------------------------------------------------------------

    def generate_native(
        self,
        name: str,
        func: Callable[..., Any],
        contract: NativeQuery,
        context: GenerationContext,
    ) -> GenerationResult:
        """Generate a method carrying hand-written SQL."""
        sql = contract.sql
        issues: list[GenerationIssue] = []

        if contract.validate_sql and context.validate_sql:
            issues.extend(self._analyzer.validate(sql, context.sql_dialect))

        params = self._planner.analyze(func)
        names = self._analyzer.extract_named_parameters(sql)
        named = contract.parameter_type is ParameterStyle.NAMED or (contract.parameter_type is None and bool(names))

        if named:
            issues.extend(self._planner.validate_named(names, params))
            bindings = self._planner.plan_named(names, params)
        else:
            count = self._analyzer.count_positional_parameters(sql)
            issues.extend(self._planner.validate_positional(count, params))
            bindings = self._planner.plan_positional(count, params)

        is_update = contract.is_update if contract.is_update is not None else self._analyzer.is_update_statement(sql)
        kind = self._analyzer.operation_kind(sql)
        if is_update and kind is OperationKind.SELECT:
            kind = OperationKind.UPDATE

        return_type = contract.result_type if contract.result_type is not None else _return_annotation(func)
        if return_type is inspect.Signature.empty and is_update:
            return_type = int
        mapping, mapping_issues = self._resolver.resolve(
            return_type,
            contract.mapping_type,
            contract.column_mapping,
            method_name=name,
        )
        issues.extend(mapping_issues)

        plan = QueryExecutionPlan(
            sql=sql,
            operation_kind=kind,
            bindings=bindings,
            mapping=mapping,
            cardinality=self._resolver.cardinality_for(mapping.target_type, kind),
            method_name=name,
            parameter_style=ParameterStyle.NAMED if named else ParameterStyle.POSITIONAL,
        )
        artifact = self._emitter.emit_update(plan) if is_update else self._emitter.emit_select(plan)
        return _result(plan, artifact, issues)

    # ------------------------------------------------------------------
    # Stub detection
    # ------------------------------------------------------------------

    @staticmethod
    def _is_stub(method: Any) -> bool:
        """Return ``True`` if *method* has a ``...`` or ``pass`` body.

        A stub's code object holds no constants beyond ``None``, ``Ellipsis``
        and its own docstring, and it references no names.
        """
        func = method
        if hasattr(func, "__wrapped__"):
            func = func.__wrapped__

        code = getattr(func, "__code__", None)
        if code is None:
            return False

        consts = set(code.co_consts)
        consts.discard(None)
        consts.discard(Ellipsis)
        consts.discard(getattr(func, "__doc__", None))
        return len(consts) == 0 and not code.co_names


def _return_annotation(func: Callable[..., Any]) -> Any:
    try:
        hints = get_type_hints(func, include_extras=True)
    except (NameError, TypeError):
        hints = {}
    if "return" in hints:
        return hints["return"]
    return inspect.signature(func).return_annotation


def _result(plan: QueryExecutionPlan, artifact: Any, issues: list[GenerationIssue]) -> GenerationResult:
    if issues:
        return GeneratedWithWarnings(plan=plan, artifact=artifact, issues=tuple(issues))
    return Generated(plan=plan, artifact=artifact)
