from .format import handle_format, handle_stdin, collect_rust_files, _format_single_file, _print_batch_summary

__all__ = [
  "_format_single_file",
  "_print_batch_summary",
  "collect_rust_files",
  "handle_format",
  "handle_stdin",
]
