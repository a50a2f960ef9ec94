"""Peso Tracker core library: entry store, reconciliation and backups.

Public API re-exports for convenient imports:
    from pesotracker import open_store, WeightEntry, import_backup, ...
"""

# Errors
from pesotracker.errors import (
    PesoTrackerError,
    PersistenceError,
    ImportFormatError,
)

# Models
from pesotracker.models import (
    WeightEntry,
    ReadOutcome,
    ReadResult,
    ImportReport,
    FilterPeriod,
    TrendSummary,
)

# Workspace & settings
from pesotracker.workspace import (
    workspace_root,
    settings_path,
    storage_dir,
    export_dir,
    load_settings,
    get_user_timezone,
    today_str,
    now_local,
    configure_logging,
    log_path,
)

# Validation
from pesotracker.validation import (
    is_date_key,
    is_iso_date,
    is_finite_number,
    coerce_weight,
    round_weight,
    parse_weight_input,
    validate_entry_input,
)

# Reconciliation
from pesotracker.merge import merge_entries, sort_entries

# Storage & store
from pesotracker.storage import (
    STORAGE_KEY,
    KeyValueStorage,
    FileStorage,
    MemoryStorage,
)
from pesotracker.store import EntryStore, open_store

# Backup
from pesotracker.backup import (
    export_json,
    export_csv,
    export_filename,
    render_export,
    write_export,
    parse_json_import,
    parse_csv_import,
    detect_format,
    import_backup,
)

# Statistics
from pesotracker.stats import (
    filter_by_period,
    weight_change,
    linear_trend,
    forecast,
    summarize,
)
