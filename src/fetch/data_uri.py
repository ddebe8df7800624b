import base64
import binascii
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes


@dataclass(frozen=True)
class DataUri:
    data: bytes
    type: str
    type_full: str
    charset: str


def decode_data_uri(uri: str) -> DataUri:
    """
    Decode an RFC 2397 `data:` URI.

    `type_full` keeps the media type parameters (minus `base64`); a URI
    without a media type defaults to `text/plain;charset=US-ASCII`.
    """
    if not uri.startswith("data:"):
        raise TypeError('`uri` does not appear to be a Data URI (must begin with "data:")')

    # strip newlines
    uri = uri.replace("\r", "").replace("\n", "")

    first_comma = uri.find(",")
    if first_comma == -1 or first_comma <= 4:
        raise TypeError("malformed data: URI")

    meta = uri[5:first_comma].split(";")

    charset = ""
    is_base64 = False
    media_type = meta[0] or "text/plain"
    type_full = media_type
    for param in meta[1:]:
        if param == "base64":
            is_base64 = True
        elif param:
            type_full += f";{param}"
            if param.startswith("charset="):
                charset = param[len("charset="):]

    if not meta[0] and not charset:
        type_full += ";charset=US-ASCII"
        charset = "US-ASCII"

    payload = unquote_to_bytes(uri[first_comma + 1:])
    if is_base64:
        try:
            payload = base64.b64decode(payload + b"=" * (-len(payload) % 4))
        except binascii.Error as e:
            raise TypeError(f"malformed base64 payload in data: URI: {e}") from e

    return DataUri(data=payload, type=media_type, type_full=type_full, charset=charset)
