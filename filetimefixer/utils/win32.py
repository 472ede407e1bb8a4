import ctypes
from ctypes import wintypes
from typing import Any, Tuple

GENERIC_READ = 0x80000000
GENERIC_WRITE = 0x40000000
FILE_SHARE_READ = 0x00000001
OPEN_EXISTING = 3
FILE_ATTRIBUTE_NORMAL = 0x00000080
FILE_FLAG_BACKUP_SEMANTICS = 0x02000000

INVALID_HANDLE_VALUE = wintypes.HANDLE(-1).value


class FILETIME(ctypes.Structure):
    _fields_ = [('dwLowDateTime', wintypes.DWORD), ('dwHighDateTime', wintypes.DWORD)]

    @classmethod
    def from_int(cls, value: int) -> 'FILETIME':
        return cls(value & 0xFFFFFFFF, value >> 32)

    def to_int(self) -> int:
        return (self.dwHighDateTime << 32) | self.dwLowDateTime


def _load_kernel32() -> Any:
    kernel32 = ctypes.WinDLL('kernel32', use_last_error=True)  # type: ignore[attr-defined]
    kernel32.CreateFileW.argtypes = [
        wintypes.LPCWSTR, wintypes.DWORD, wintypes.DWORD, wintypes.LPVOID,
        wintypes.DWORD, wintypes.DWORD, wintypes.HANDLE
    ]
    kernel32.CreateFileW.restype = wintypes.HANDLE
    kernel32.GetFileTime.argtypes = [
        wintypes.HANDLE, ctypes.POINTER(FILETIME), ctypes.POINTER(FILETIME), ctypes.POINTER(FILETIME)
    ]
    kernel32.GetFileTime.restype = wintypes.BOOL
    kernel32.SetFileTime.argtypes = [
        wintypes.HANDLE, ctypes.POINTER(FILETIME), ctypes.POINTER(FILETIME), ctypes.POINTER(FILETIME)
    ]
    kernel32.SetFileTime.restype = wintypes.BOOL
    kernel32.CloseHandle.argtypes = [wintypes.HANDLE]
    kernel32.CloseHandle.restype = wintypes.BOOL
    return kernel32


_kernel32 = None


def kernel32() -> Any:
    global _kernel32
    if _kernel32 is None:
        _kernel32 = _load_kernel32()
    return _kernel32


def _last_error(path: str) -> OSError:
    code = ctypes.get_last_error()  # type: ignore[attr-defined]
    return ctypes.WinError(code, f'{ctypes.FormatError(code).strip()}: {path!r}')  # type: ignore[attr-defined]


def create_file(path: str, access: int, is_file: bool) -> int:
    flags = FILE_ATTRIBUTE_NORMAL if is_file else FILE_FLAG_BACKUP_SEMANTICS
    handle = kernel32().CreateFileW(path, access, FILE_SHARE_READ, None, OPEN_EXISTING, flags, None)
    if handle is None or handle == INVALID_HANDLE_VALUE:
        raise _last_error(path)
    return handle


def get_file_time(handle: int, path: str) -> Tuple[int, int]:
    creation, last_write = FILETIME(), FILETIME()
    if not kernel32().GetFileTime(handle, ctypes.byref(creation), None, ctypes.byref(last_write)):
        raise _last_error(path)
    return creation.to_int(), last_write.to_int()


def set_file_time(handle: int, path: str, creation: int, last_write: int) -> None:
    creation_ft, last_write_ft = FILETIME.from_int(creation), FILETIME.from_int(last_write)
    if not kernel32().SetFileTime(handle, ctypes.byref(creation_ft), None, ctypes.byref(last_write_ft)):
        raise _last_error(path)


def close_handle(handle: int) -> None:
    kernel32().CloseHandle(handle)
