"""
Client configuration module.

Provides the configuration for the linx transfer client and the loader
for the YAML config file. A configuration is built once per run and is
read-only afterwards.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, Tuple, Iterable, Union
from urllib.parse import urlsplit

import yaml

from ..exceptions import LinxConfigError
from ..logging import get_logger

DEFAULT_USER_AGENT = 'linxpy/1.0.0'
CONFIG_DIR_NAME = 'linxpy'
CONFIG_FILE_NAME = 'config.yml'

# Config file keys that have a shorter spelling
_KEY_ALIASES = {
    'apikey': 'api_key',
    'uploadlog': 'upload_log',
}

logger = get_logger('linxpy.config')

Header = Tuple[str, str]


@dataclass(frozen=True)
class ProxyConfig:
    """
    Proxy configuration.

    HTTP and HTTPS proxies are passed to aiohttp per request; SOCKS
    proxies are dialed by the session connector instead.
    """
    url: str
    username: Optional[str] = None
    password: Optional[str] = None

    HTTP_SCHEMES = ('http', 'https')
    SOCKS_SCHEMES = ('socks4', 'socks4a', 'socks5', 'socks5h')
    SUPPORTED_SCHEMES = HTTP_SCHEMES + SOCKS_SCHEMES

    def __post_init__(self):
        try:
            parts = urlsplit(self.url)
            parts.port  # raises on a malformed port
        except ValueError as e:
            raise LinxConfigError(f"Failed to parse proxy URL: {e}")

        if parts.scheme not in self.SUPPORTED_SCHEMES:
            raise LinxConfigError(
                f"Failed to obtain proxy dialer: unsupported proxy scheme "
                f"'{parts.scheme}' in {self.url}"
            )
        if not parts.hostname:
            raise LinxConfigError(f"Failed to parse proxy URL: missing host in {self.url}")

    @classmethod
    def from_url(cls, url: Optional[str]) -> Optional['ProxyConfig']:
        """Create proxy configuration, or None for a direct connection."""
        if not url:
            return None
        return cls(url=url)

    @property
    def is_socks(self) -> bool:
        """Whether the proxy is dialed by the connector rather than per request."""
        return urlsplit(self.url).scheme in self.SOCKS_SCHEMES

    def to_aiohttp_proxy(self) -> str:
        """Convert to aiohttp proxy format."""
        if self.username and self.password and '://' in self.url:
            protocol, rest = self.url.split('://', 1)
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


def parse_headers(lines: Iterable[str]) -> Tuple[Header, ...]:
    """
    Parse 'Name: Value' strings into header pairs.

    Args:
        lines: Header strings as written in the config file

    Returns:
        Tuple of (name, value) pairs, in the given order

    Raises:
        LinxConfigError: If a line is not of the form 'Name: Value'
    """
    if isinstance(lines, str):
        lines = [lines]

    headers = []
    for line in lines:
        parts = str(line).split(': ', 1)
        if len(parts) != 2 or not parts[0].strip():
            raise LinxConfigError(f'Invalid header "{line}": expected "Name: Value"')
        headers.append((parts[0].strip(), parts[1]))
    return tuple(headers)


@dataclass(frozen=True)
class LinxConfig:
    """
    Complete client configuration.

    Attributes:
        server: Base URL of the linx server, always ending in '/'
        proxy: Optional forward proxy
        api_key: Optional value for the Linx-Api-Key header
        upload_log: Optional path of the delete-key log
        headers: Extra headers appended to every request
        user_agent: User-Agent header value
        timeout: Total request timeout in seconds (None blocks until the response)
    """
    server: str
    proxy: Optional[ProxyConfig] = None
    api_key: Optional[str] = None
    upload_log: Optional[Path] = None
    headers: Tuple[Header, ...] = ()
    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[float] = None
    connection_limit: int = 10

    def __post_init__(self):
        if not self.server:
            raise LinxConfigError("Required option server not specified in config or as a flag")

        scheme = urlsplit(self.server).scheme
        if scheme not in ('http', 'https'):
            raise LinxConfigError(f"Server URL must start with http:// or https://: {self.server}")

        # frozen dataclass, normalize through object.__setattr__
        if not self.server.endswith('/'):
            object.__setattr__(self, 'server', self.server + '/')
        if isinstance(self.upload_log, str):
            object.__setattr__(
                self, 'upload_log',
                Path(os.path.expanduser(self.upload_log)) if self.upload_log else None
            )
        object.__setattr__(self, 'headers', tuple(tuple(h) for h in self.headers))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LinxConfig':
        """
        Create configuration from a dictionary.

        Accepts the config file keys (server, proxy, apikey/api_key,
        uploadlog/upload_log, headers, timeout).
        """
        data = {_KEY_ALIASES.get(k, k): v for k, v in data.items()}

        known = {'server', 'proxy', 'api_key', 'upload_log', 'headers', 'timeout', 'user_agent'}
        unknown = set(data) - known
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        timeout = data.get('timeout')
        return cls(
            server=str(data.get('server') or ''),
            proxy=ProxyConfig.from_url(data.get('proxy')),
            api_key=data.get('api_key') or None,
            upload_log=str(data['upload_log']) if data.get('upload_log') else None,
            headers=parse_headers(data.get('headers') or ()),
            user_agent=data.get('user_agent') or DEFAULT_USER_AGENT,
            timeout=float(timeout) if timeout else None,
        )

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.connection_limit,
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        import aiohttp
        return {
            'timeout': aiohttp.ClientTimeout(total=self.timeout),
        }

    def get_proxy(self) -> Optional[str]:
        """Get the proxy argument for aiohttp requests (None for SOCKS proxies)."""
        if self.proxy is None or self.proxy.is_socks:
            return None
        return self.proxy.to_aiohttp_proxy()

    def get_socks_proxy(self) -> Optional[str]:
        """Get the SOCKS proxy URL the session connector dials through."""
        if self.proxy is None or not self.proxy.is_socks:
            return None
        return self.proxy.to_aiohttp_proxy()


def default_config_path() -> Path:
    """Return $XDG_CONFIG_HOME/linxpy/config.yml (~/.config when unset)."""
    config_home = os.environ.get('XDG_CONFIG_HOME')
    base = Path(config_home) if config_home else Path.home() / '.config'
    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def read_config_file(path: Optional[Union[str, Path]]) -> Dict[str, Any]:
    """
    Read the YAML config file.

    A missing or unreadable file is not an error: the values may still
    come from the command line.

    Raises:
        LinxConfigError: If the file is not valid YAML or not a mapping
    """
    if not path:
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        logger.warning(f"Unable to read config file: {e}")
        return {}
    except yaml.YAMLError as e:
        raise LinxConfigError(f"Unable to parse config file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LinxConfigError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded config file {path}")
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    server: Optional[str] = None,
    proxy: Optional[str] = None,
    api_key: Optional[str] = None,
    upload_log: Optional[Union[str, Path]] = None,
) -> LinxConfig:
    """
    Load configuration from file, then apply non-empty overrides.

    Args:
        path: Config file path (None skips the file)
        server: Server URL override
        proxy: Proxy URL override
        api_key: API key override
        upload_log: Upload log path override

    Returns:
        Validated configuration
    """
    data = {_KEY_ALIASES.get(k, k): v for k, v in read_config_file(path).items()}

    overrides = {
        'server': server,
        'proxy': proxy,
        'api_key': api_key,
        'upload_log': upload_log,
    }
    for key, value in overrides.items():
        if value:
            data[key] = value

    return LinxConfig.from_dict(data)
