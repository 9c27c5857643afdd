# docschema exports
from docschema.config import settings, get_settings
from docschema.logging import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
    unbind_context,
    generate_correlation_id,
    schema_logger,
    validation_logger,
)
from docschema.errors import (
    AppError,
    ErrorCode,
    Ok,
    Err,
    Result,
    CompileError,
    SerializeError,
    InvalidUsageError,
)
from docschema.schema import (
    Schema,
    Field,
    Document,
    ErrorReport,
    RequestContext,
    RequestCancelled,
    TOMBSTONE,
    is_tombstone,
    FieldValidator,
    FieldSerializer,
    FieldHook,
    Dependency,
    Exists,
    Equals,
    In,
    hook,
)
from docschema.fields import id_field, created_field, updated_field

__version__ = "0.1.0"
