"""Exception types raised by the kubeadm cluster provider."""


class ProviderError(Exception):
    """Base class for all provider errors."""
    pass


class KubeadmVersionError(ProviderError):
    """Raised when the installed kubeadm version cannot be determined."""
    pass


class InvalidBootstrapTokenError(ProviderError):
    """Raised when a cluster token is not in bootstrap token form."""

    def __init__(self, token: str):
        # Only the shape is reported, never the token itself
        super().__init__(
            f"cluster token of length {len(token)} does not match the bootstrap "
            f"token format [a-z0-9]{{6}}.[a-z0-9]{{16}}"
        )


class UnregisteredKindError(ProviderError):
    """Raised when an object kind has no registration in the scheme."""

    def __init__(self, kind: str, group_versions):
        self.kind = kind
        super().__init__(
            f"no kind {kind!r} is registered for group versions {', '.join(group_versions)}"
        )


class PluginRegistrationError(ProviderError):
    """Raised when an event handler cannot be registered with the plugin."""
    pass


class FrozenContextError(ProviderError):
    """Raised when a frozen cluster context is written to."""
    pass


class TemplateRenderError(ProviderError):
    """Raised when a file template fails to render."""
    pass
