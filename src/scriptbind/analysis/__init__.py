# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Annotation decoding, type classification, collection and post-processing."""

from scriptbind.analysis.annotations import EXPORT_MARKER, parse_export_annotation, split_annotation
from scriptbind.analysis.classifier import (
    ClassificationError,
    builtin_typedef,
    classify,
    event_signature,
    find_sentinel,
    managed_builtin,
    resolve_type_info,
)
from scriptbind.analysis.collector import PRESEEDED_STRUCTS, collect, evaluate_default, seed_type_map
from scriptbind.analysis.comments import normalize_signature_text, parse_doc_comment, resolve_copydocs
from scriptbind.analysis.postprocess import (
    companion_header,
    interop_struct_name,
    iter_class_refs,
    iter_struct_refs,
    postprocess,
)

__all__ = [
    # Annotations
    "EXPORT_MARKER",
    "parse_export_annotation",
    "split_annotation",
    # Classification
    "ClassificationError",
    "builtin_typedef",
    "classify",
    "event_signature",
    "find_sentinel",
    "managed_builtin",
    "resolve_type_info",
    # Collection
    "PRESEEDED_STRUCTS",
    "collect",
    "evaluate_default",
    "seed_type_map",
    # Comments
    "normalize_signature_text",
    "parse_doc_comment",
    "resolve_copydocs",
    # Post-processing
    "companion_header",
    "interop_struct_name",
    "iter_class_refs",
    "iter_struct_refs",
    "postprocess",
]
