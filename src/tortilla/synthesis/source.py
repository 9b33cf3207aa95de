"""Render routine specs as Python source with libcst.

The rendered module behaves like the closures from
`tortilla.synthesis.emission`: same clause order, same guards, same
fallback errors. Every referenced type, target and coercion hook is written
as a dotted path and its module is imported at the top of the output.
"""

from __future__ import annotations

import sys
from typing import Iterable

import libcst as cst

from tortilla.synthesis.coercion import callable_path
from tortilla.synthesis.emission import describe_routine
from tortilla.synthesis.model import ClauseSet, DispatchClause, RoutineSpec
from tortilla.types import TypeRef, binding_cast, boxed, type_name

_INDENT = "    "
_IS_INSTANCE = "tortilla.types.is_instance"
_OVERLOAD_ERROR = "tortilla.exceptions.OverloadResolutionError"
_HEADER = "# Generated by tortilla. Do not edit."


def _module_for(path: str) -> str | None:
    parts = path.split(".")
    for split in range(len(parts) - 1, 0, -1):
        candidate = ".".join(parts[:split])
        if candidate in sys.modules:
            return candidate
    return None


class _RoutineWriter:
    def __init__(self, spec: RoutineSpec) -> None:
        self.spec = spec
        self.references: set[str] = {_IS_INSTANCE, _OVERLOAD_ERROR}

    def ref(self, path: str) -> str:
        self.references.add(path)
        return path

    def type_ref(self, t: TypeRef) -> str:
        return self.ref(type_name(boxed(t)))

    def coerced(self, clause: DispatchClause, expr: str, t: TypeRef) -> str:
        if clause.coerce is None:
            return expr
        return f"{self.ref(callable_path(clause.coerce))}({expr}, {self.type_ref(t)})"

    def guard(self, clause: DispatchClause) -> str:
        tests = [
            f"{_IS_INSTANCE}({self.coerced(clause, f'args[{index}]', t)}, {self.type_ref(t)})"
            for index, t in enumerate(clause.guard_types())
        ]
        if clause.tail:
            element = clause.member.varargs_type
            tests.append(
                f"all({_IS_INSTANCE}({self.coerced(clause, 'value', element)}, "
                f"{self.type_ref(element)}) for value in args[{clause.arity}:])"
            )
        return " and ".join(tests) or "True"

    def bind(self, clause: DispatchClause, index: int, t: TypeRef) -> str:
        expr = self.coerced(clause, f"args[{index}]", t)
        cast = binding_cast(t)
        if cast is None:
            return expr
        return f"{cast.__name__}({expr})"

    def invocation(self, clause: DispatchClause) -> str:
        member = clause.member
        arguments = [
            self.bind(clause, index, t) for index, t in enumerate(member.declared_types)
        ]
        if member.varargs_type is not None:
            start = member.parameter_count
            if clause.coerce is None:
                arguments.append(f"*args[{start}:]")
            else:
                element = self.coerced(clause, "value", member.varargs_type)
                arguments.append(f"*[{element} for value in args[{start}:]]")
        return f"{self.ref(member.invocation_path)}({', '.join(arguments)})"

    def clause_set_lines(self, clause_set: ClauseSet) -> list[str]:
        operator = ">=" if clause_set.tail else "=="
        lines = [f"if len(args) {operator} {clause_set.arity}:"]
        for clause in clause_set.clauses:
            if not clause.guarded:
                lines.append(f"{_INDENT}return {self.invocation(clause)}")
                return lines
            lines.append(f"{_INDENT}if {self.guard(clause)}:")
            lines.append(f"{_INDENT * 2}return {self.invocation(clause)}")
        lines.append(
            f"{_INDENT}raise {_OVERLOAD_ERROR}"
            f"({clause_set.owner!r}, {clause_set.member_name!r}, args)"
        )
        return lines

    def source(self) -> str:
        spec = self.spec
        lines = [f"def {spec.identifier}(*args):"]
        for clause_set in spec.clause_sets:
            lines.extend(f"{_INDENT}{line}" for line in self.clause_set_lines(clause_set))
        lines.append(
            f"{_INDENT}raise {_OVERLOAD_ERROR}({spec.owner!r}, {spec.member_name!r}, args, "
            'reason=f"Wrong number of arguments ({len(args)}) for")'
        )
        return "\n".join(lines) + "\n"


def _docstring(text: str) -> cst.SimpleStatementLine:
    body = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    first, *rest = body.splitlines() or [""]
    indented = "\n".join([first, *(f"{_INDENT}{line}" if line else "" for line in rest)])
    return cst.SimpleStatementLine(
        [cst.Expr(cst.SimpleString(f'"""{indented}\n{_INDENT}"""'))]
    )


def render_routine(
    spec: RoutineSpec,
    *,
    metadata: bool = True,
    width: int = 100,
) -> tuple[cst.FunctionDef, set[str]]:
    writer = _RoutineWriter(spec)
    function = cst.parse_statement(writer.source())
    if not isinstance(function, cst.FunctionDef):  # pragma: no cover
        raise TypeError("routine source did not parse as a function")
    if metadata:
        doc = _docstring(describe_routine(spec, width=width))
        function = function.with_changes(
            body=function.body.with_changes(body=[doc, *function.body.body])
        )
    return function, writer.references


def _import_line(module: str) -> cst.SimpleStatementLine:
    name = cst.parse_expression(module)
    if not isinstance(name, (cst.Name, cst.Attribute)):  # pragma: no cover
        raise TypeError(f"not an importable module name: {module}")
    return cst.SimpleStatementLine([cst.Import(names=[cst.ImportAlias(name=name)])])


def render_module(
    specs: Iterable[RoutineSpec],
    *,
    metadata: bool = True,
    width: int = 100,
) -> cst.Module:
    functions: list[cst.FunctionDef] = []
    references: set[str] = set()
    for spec in specs:
        function, used = render_routine(spec, metadata=metadata, width=width)
        functions.append(
            function.with_changes(leading_lines=[cst.EmptyLine(), cst.EmptyLine()])
        )
        references |= used
    modules = {module for module in map(_module_for, references) if module and module != "builtins"}
    imports = [_import_line(module) for module in sorted(modules)]
    return cst.Module(
        body=[*imports, *functions],
        header=[cst.EmptyLine(comment=cst.Comment(_HEADER))],
    )


def render_routines(
    specs: Iterable[RoutineSpec],
    *,
    metadata: bool = True,
    width: int = 100,
) -> str:
    return render_module(specs, metadata=metadata, width=width).code
