"""Template acquisition."""

from mvpgen.templates.acquisition import (
    AcquisitionMode,
    TemplateAcquirer,
    copy_template_tree,
    extract_archive,
    get_package_templates_path,
)

__all__ = [
    "AcquisitionMode",
    "TemplateAcquirer",
    "copy_template_tree",
    "extract_archive",
    "get_package_templates_path",
]
