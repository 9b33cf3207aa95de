"""Synthesis subpackage for tortilla."""

from tortilla.synthesis.assembler import (
    MemberDescriptors,
    assemble_class,
    assemble_routine,
    generate,
    member_descriptors,
)
from tortilla.synthesis.coercion import coerce, resolve_callable
from tortilla.synthesis.dispatch import generate_fixed, generate_tail
from tortilla.synthesis.emission import (
    build_routine,
    describe_routine,
    install_wrappers,
    wrap_class,
)
from tortilla.synthesis.grouping import group_by_arity
from tortilla.synthesis.model import (
    ArityBucket,
    ArityGroup,
    ClauseSet,
    DispatchClause,
    RoutineSpec,
    WrapOptions,
)
from tortilla.synthesis.naming import transform_name
from tortilla.synthesis.source import render_routines

__all__ = [
    "ArityBucket",
    "ArityGroup",
    "ClauseSet",
    "DispatchClause",
    "MemberDescriptors",
    "RoutineSpec",
    "WrapOptions",
    "assemble_class",
    "assemble_routine",
    "build_routine",
    "coerce",
    "describe_routine",
    "generate",
    "generate_fixed",
    "generate_tail",
    "group_by_arity",
    "install_wrappers",
    "member_descriptors",
    "render_routines",
    "resolve_callable",
    "transform_name",
    "wrap_class",
]
