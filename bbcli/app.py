"""Per-invocation application context passed to every command."""

import logging

from bbcli.adapters import BitbucketAdapter
from bbcli.browser import Browser, browser_command
from bbcli.config import Config, EnvSettings, HostsConfig, load_config, load_hosts
from bbcli.credentials import resolve_credential
from bbcli.editor import Editor, editor_command
from bbcli.iostreams import IOStreams
from bbcli.services.git import GitWorkingCopy, WorkingCopy

logger = logging.getLogger(__name__)


class AppContext:
    """Settings, streams, working copy and API client of one command run.

    The API client is built on first use, so commands that fail local
    validation never read credentials or open a connection.
    """

    def __init__(
        self,
        settings: EnvSettings,
        config: Config,
        hosts: HostsConfig,
        streams: IOStreams,
        working_copy: WorkingCopy,
        editor: Editor,
        browser: Browser,
        client: BitbucketAdapter | None = None,
    ) -> None:
        self.settings = settings
        self.config = config
        self.hosts = hosts
        self.streams = streams
        self.working_copy = working_copy
        self.editor = editor
        self.browser = browser
        self._client = client

    @classmethod
    def from_environment(cls, settings: EnvSettings | None = None, config: Config | None = None) -> "AppContext":
        """Context for a real run: process env, config dir, cwd checkout."""
        settings = settings or EnvSettings()
        config = config or load_config(settings=settings)
        return cls(
            settings=settings,
            config=config,
            hosts=load_hosts(settings=settings),
            streams=IOStreams.system(settings),
            working_copy=GitWorkingCopy(),
            editor=Editor(editor_command(settings, config)),
            browser=Browser(browser_command(settings, config)),
        )

    @property
    def client(self) -> BitbucketAdapter:
        if self._client is None:
            credential = resolve_credential(self.settings, self.hosts)
            logger.debug("Authenticated with token from %s", credential.source)
            self._client = BitbucketAdapter(credential, timeout=self.config.http_timeout)
        return self._client
