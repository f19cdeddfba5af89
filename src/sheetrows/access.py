from collections.abc import Iterable
from pathlib import Path
import json
import copy

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from loguru import logger

class SheetsAccess():
    """
    Authenticated access to the Sheets REST api.
    See https://developers.google.com/workspace/guides/create-credentials#choose_the_access_credential_that_is_right_for_you
    for an overview of what you'll need.  Once you've obtained a secrets file you can refer the object to it
    for authentication.  For OAuth it will trigger the confirmation screens.  Sessions are cached
    and refreshed so confirmation does not need to happen repeatedly.  Without a secrets file the
    application default credentials are tried.

    The sheet client doesn't use this directly, the transport asks it for headers() on every call.
    Public spreadsheets read with just an api key need no session at all.
    """

    __SCOPES = {
        "sheets": "https://www.googleapis.com/auth/spreadsheets",
        "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
        "drive-file": "https://www.googleapis.com/auth/drive.file",
        "drive": "https://www.googleapis.com/auth/drive",
        "drive-ro": "https://www.googleapis.com/auth/drive.readonly",
    }
    __SCOPE_URL_PREFIX = "https://www.googleapis.com/"

    __DEFAULT_AUTH_PROMPT_MSG = "Please visit this URL to authorize spreadsheet access: {url}"
    __DEFAULT_AUTH_FLOW_SUCCESS_MSG = "Spreadsheet access authorized, you may close this window."
    __DEFAULT_SECRETS = Path.home() / "sheetrows_client_secrets.json"
    __DEFAULT_CACHE = Path.home() / "sheetrows_tokens.json"

    def __init__(self) -> None:
        self.reset()

    def __bool__(self) -> bool:
        """True if we are connected and authenticated"""
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.session_scopes)}"
        return f"Disconnected:{str(self.__scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @classmethod
    def get_scope(cls, scope: str) -> str:
        """
        Get a scope based on simplified label.
        A raw URL will also be accepted.
        """
        s = str(scope)
        sc = cls.__SCOPES.get(s, "")
        if not sc and s.startswith(cls.__SCOPE_URL_PREFIX):
            sc = s
        return sc

    @property
    def client_secrets(self) -> Path:
        """
        Path to client secrets file as provided by Google when generating access credentials.
        """
        return self.__secrets

    @client_secrets.setter
    def client_secrets(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__secrets:
            self.__secrets = val
            if self.connected:
                self.connect()

    @property
    def cred_cache(self) -> Path:
        """
        Path to local credential cache to not have to do full authentication each time.
        """
        return self.__cache

    @cred_cache.setter
    def cred_cache(self, value: Path|str) -> None:
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__cache:
            self.__cache = val
            if self.connected:
                self.connect()

    @property
    def connected(self) -> bool:
        """
        Are we authenticated with Google?
        """
        return bool(self.__creds) and bool(self.__creds.valid)

    @property
    def session_scopes(self) -> list[str]:
        """
        Scopes granted for this session, as opposed to scopes which is
        what is requested.
        """
        if self.connected:
            return list(self.__creds.scopes or [])
        return []

    @property
    def scopes(self) -> list[str]:
        """
        The scopes requested or to be requested on next authentication sequence.
        """
        return self.__scopes

    @scopes.setter
    def scopes(self, value: None|list[str]|str) -> None:
        """
        Override the list of requested scopes.  Unknown labels are dropped.
        """
        slist = []
        if value is not None:
            values = [value] if isinstance(value, str) or not isinstance(value, Iterable) else value
            for v in values:
                s = self.get_scope(str(v))
                if s and s not in slist:
                    slist.append(s)
        self.__scopes = slist
        if self.__scopes and self.connected:
            self.refresh()
        else:
            self.__creds = None

    def append_scopes(self, *args) -> bool:
        """
        Add to the current scope list, reconnecting if the session doesn't cover them.
        """
        for a in args:
            b = [a] if isinstance(a, str) or not isinstance(a, Iterable) else a
            for i in b:
                s = self.get_scope(str(i))
                if s and s not in self.__scopes:
                    self.__scopes.append(s)
        return self.refresh()

    @property
    def creds(self) -> Credentials|None:
        """
        Current active access credentials or None
        """
        return self.__creds

    @creds.setter
    def creds(self, value: Credentials|None) -> None:
        """Use credentials obtained elsewhere, a service account for example"""
        self.__creds = value

    @property
    def config(self) -> dict:
        """
        Get all configuration state as a dict.
        """
        return {
            'secrets': self.__secrets,
            'cache': self.__cache,
            'scopes': self.__scopes,
            'server': self.auth_server,
            'port': self.auth_port
        }

    @config.setter
    def config(self, config: dict) -> None:
        """
        Set configuration state from a dict, such as SheetRowsSettings.access_config().
        Missing or None entries are left alone.
        """
        reconnect = False
        v = config.get('port', None)
        if v is not None:
            self.auth_port = int(v)
        v = config.get('server', None)
        if v is not None:
            self.auth_server = str(v)
        v = config.get('scopes', [])
        if v:
            self.scopes = v
            reconnect = True
        v = config.get('cache', None)
        if v is not None:
            self.__cache = Path(v)
            reconnect = True
        v = config.get('secrets', None)
        if v is not None:
            self.__secrets = Path(v)
            reconnect = True
        v = config.get('auth_prompt_msg', None)
        if v is not None:
            self.auth_prompt_msg = str(v)
        v = config.get('flow_success_msg', None)
        if v is not None:
            self.auth_flow_success_msg = str(v)
        if reconnect and self.connected:
            self.connect()

    def reset(self) -> None:
        """
        Reset all connection state to defaults.
        """
        self.__secrets = self.__DEFAULT_SECRETS
        self.__cache = self.__DEFAULT_CACHE
        self.__creds = None
        self.__scopes = []
        self.auth_server = 'localhost'
        self.auth_port = 0
        self.auth_prompt_msg = self.__DEFAULT_AUTH_PROMPT_MSG
        self.auth_flow_success_msg = self.__DEFAULT_AUTH_FLOW_SUCCESS_MSG

    def refresh(self) -> bool:
        """
        Reconnect if the current session doesn't cover the requested scopes.
        """
        scopes_accounted = all(s in self.session_scopes for s in self.__scopes)
        if self.connected and not scopes_accounted:
            return self.connect()
        return True

    def _load_cache(self, requested_scopes: list[str]) -> None:
        if not (self.__cache.exists() and self.__cache.is_file()):
            return
        cf = self.__cache.resolve()
        with open(cf, 'r', encoding='utf-8') as f:
            j = json.load(f)
        # a cache for other scopes is no use to us
        if not all(s in j.get('scopes', []) for s in requested_scopes):
            self.__cache.unlink()
        else:
            self.__creds = Credentials.from_authorized_user_file(str(cf), requested_scopes)

    def _save_cache(self, requested_scopes: list[str]) -> None:
        refresh_token = getattr(self.__creds, 'refresh_token', None)
        if not refresh_token:
            return
        user_info = {'refresh_token': refresh_token, 'client_id': self.__creds.client_id,
                     'client_secret': self.__creds.client_secret, 'scopes': requested_scopes}
        with open(self.__cache.resolve(), 'w', encoding='utf-8') as f:
            json.dump(user_info, f, ensure_ascii=False, indent=2)

    def connect(self) -> bool:
        """
        Establish a new authentication session, from the cache, the OAuth
        installed app flow or the application default credentials in that order.
        If successful the credentials are cached for subsequent runs.
        """
        self.__creds = None
        if not self.__scopes:
            return False
        requested_scopes = copy.copy(self.__scopes)
        self._load_cache(requested_scopes)
        if not self.connected and self.__creds and self.__creds.refresh_token:
            try:
                self.__creds.refresh(Request())
            except google.auth.exceptions.RefreshError as e:
                logger.warning("failed to refresh stored creds: {}, re-authorizing", e)
            if not self.connected:
                self.__creds = None
                self.__cache.unlink(missing_ok=True)

        if not self.connected:
            if self.__secrets.exists() and self.__secrets.is_file():
                flow = InstalledAppFlow.from_client_secrets_file(str(self.__secrets), requested_scopes)
                self.__creds = flow.run_local_server(host=self.auth_server, port=self.auth_port,
                                                     authorization_prompt_message=self.auth_prompt_msg,
                                                     success_message=self.auth_flow_success_msg)
            else:
                try:
                    # GOOGLE_APPLICATION_CREDENTIALS and the other cloud default locations
                    self.__creds, _ = google.auth.default(scopes=requested_scopes)
                    if not self.__creds.valid:
                        self.__creds.refresh(Request())
                except google.auth.exceptions.DefaultCredentialsError as e:
                    logger.warning("no default credentials available: {}", e)
                    self.__creds = None

            if self.connected:
                self._save_cache(requested_scopes)
        return self.connected

    def headers(self) -> dict[str, str]:
        """
        Authorization header for a request, connecting or refreshing as needed.
        Empty when there's no session to be had, leaving the api key to do the work.
        """
        if not self.connected:
            if self.__creds is not None and getattr(self.__creds, 'refresh_token', None):
                try:
                    self.__creds.refresh(Request())
                except google.auth.exceptions.RefreshError as e:
                    logger.warning("failed to refresh session: {}", e)
            if not self.connected and self.__scopes:
                self.connect()
        if not self.connected:
            return {}
        return {"Authorization": f"Bearer {self.__creds.token}"}

gws = SheetsAccess()
