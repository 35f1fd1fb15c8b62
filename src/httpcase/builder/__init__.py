"""Declaration collection, compilation and entry point generation."""

from .api import REQUEST_DOC, Api, Executor, api
from .client import EMPTY_CLIENT, Client, client, runtime_step, runtime_steps
from .compiler import (
    InlineCall,
    ModuleCall,
    PipelineConfig,
    Step,
    compile_adapter,
    compile_declaration,
    compile_middleware,
    compile_pipeline,
)
from .declarations import (
    ABSENT,
    Builder,
    Declaration,
    DeclarationKind,
    InlineFunction,
    ModuleReference,
    Origin,
    SymbolicName,
    Target,
    parse_target,
)
from .request import OPTION_KEYS, Method, Options, Request, RequestOption
from .verbs import (
    HTTP_VERBS,
    RAISING_SUFFIX,
    VERB_NAMES,
    ClientMode,
    EntryPoint,
    EntryPointVariant,
    ErrorMode,
    GenerationOptions,
    LegacyClientShim,
    OptsMode,
    VerbSpec,
    enumerate_variants,
    generate_entry_points,
)

__all__ = [
    # Client classes
    "Api", "api", "Executor", "REQUEST_DOC",
    # Declarations
    "Builder", "Declaration", "DeclarationKind", "Origin", "ABSENT",
    "Target", "ModuleReference", "InlineFunction", "SymbolicName", "parse_target",
    # Compilation
    "Step", "ModuleCall", "InlineCall", "PipelineConfig",
    "compile_declaration", "compile_middleware", "compile_adapter", "compile_pipeline",
    # Runtime clients
    "Client", "EMPTY_CLIENT", "client", "runtime_step", "runtime_steps",
    # Requests
    "Request", "RequestOption", "Options", "Method", "OPTION_KEYS",
    # Entry points
    "VerbSpec", "HTTP_VERBS", "VERB_NAMES", "RAISING_SUFFIX", "GenerationOptions",
    "EntryPointVariant", "EntryPoint", "LegacyClientShim", "ErrorMode", "ClientMode", "OptsMode",
    "enumerate_variants", "generate_entry_points",
]
