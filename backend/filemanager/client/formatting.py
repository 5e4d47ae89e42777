"""
Display helpers shared by the upload queue and the file list.
"""

KB = 1024
MB = 1024 * 1024

# Extension -> color tag for the file type badge
FILE_ICON_COLORS = {
    'pdf': 'red',
    'doc': 'blue',
    'docx': 'blue',
    'xls': 'green',
    'xlsx': 'green',
    'ppt': 'orange',
    'pptx': 'orange',
    'jpg': 'purple',
    'jpeg': 'purple',
    'png': 'purple',
    'gif': 'purple',
    'zip': 'yellow',
    'rar': 'yellow',
    'txt': 'gray',
}
DEFAULT_ICON_COLOR = 'blue'


def format_file_size(size: int) -> str:
    """Format a byte count as B, KB or MB."""
    if size < KB:
        return f"{size} B"
    if size < MB:
        return f"{size / KB:.1f} KB"
    return f"{size / MB:.1f} MB"


def format_upload_speed(bytes_per_second: float) -> str:
    """Format a transfer rate as B/s, KB/s or MB/s."""
    if bytes_per_second < KB:
        return f"{bytes_per_second:.1f} B/s"
    if bytes_per_second < MB:
        return f"{bytes_per_second / KB:.1f} KB/s"
    return f"{bytes_per_second / MB:.1f} MB/s"


def get_file_extension(filename: str) -> str:
    """
    Return the lowercased text after the last dot.

    Names without a dot have no extension.
    """
    if '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[-1].lower()


def get_file_name(path: str) -> str:
    """Return the final path segment of an object key."""
    return path.rsplit('/', 1)[-1] or path


def get_file_icon_color(extension: str) -> str:
    return FILE_ICON_COLORS.get(extension, DEFAULT_ICON_COLOR)
