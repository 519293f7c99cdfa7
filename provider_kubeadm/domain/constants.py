"""Paths, file names and defaults shared by the stage builders."""

# Provider options
CLUSTER_ROOT_PATH_OPTION = "cluster_root_path"
SPECTRO_CONTAINERD_OPTION = "spectro-containerd-service-name"

DEFAULT_ROOT_PATH = "/"
CONTAINERD_SERVICE_FOLDER = "containerd"
SPECTRO_CONTAINERD_SERVICE_FOLDER = "spectro-containerd"

# Locations relative to the cluster root path
HELPER_SCRIPT_PATH = "opt/kubeadm/scripts"
CONFIGURATION_PATH = "opt/kubeadm"
KUBE_IMAGES_PATH = "opt/kube-images"
LOCAL_IMAGES_PATH = "opt/content/images"

KUBEADM_INIT_SENTINEL = "opt/kubeadm.init"
KUBEADM_JOIN_SENTINEL = "opt/kubeadm.join"
POST_KUBEADM_INIT_SENTINEL = "opt/post-kubeadm.init"

KUBEADM_CONFIG_FILE = "kubeadm.yaml"
CLUSTER_CONFIG_FILE = "cluster-config.yaml"
KUBELET_CONFIG_FILE = "kubelet-config.yaml"

# Absolute locations
KUBELET_ENV_FILE = "/etc/default/kubelet"
RUN_SYSTEMD_SYSTEM_DIR = "/run/systemd/system"
CONTAINERD_PROXY_FILE = "http-proxy.conf"
IMPORT_LOG = "/var/log/import.log"
IMPORT_KUBE_IMAGES_LOG = "/var/log/import-kube-images.log"

# File modes
CONFIG_FILE_PERMISSIONS = 0o640
PROXY_FILE_PERMISSIONS = 0o400

# Kubernetes defaults
API_SERVER_PORT = 6443
DEFAULT_API_ADVERTISE_ADDRESS = "0.0.0.0"
DEFAULT_IMAGE_REPOSITORY = "registry.k8s.io"
DEFAULT_MANIFESTS_DIR = "/etc/kubernetes/manifests"
DEFAULT_SERVICE_DNS_DOMAIN = "cluster.local"
DEFAULT_CLUSTER_DNS_IP = "10.96.0.10"
KUBERNETES_DIR = "/etc/kubernetes"
CA_CERT_PATH = "/etc/kubernetes/pki/ca.crt"
KUBELET_HEALTHZ_PORT = 10248
CRI_SOCKET_CONTAINERD = "unix:///var/run/containerd/containerd.sock"
CGROUP_DRIVER_SYSTEMD = "systemd"
SYSTEMD_RESOLVED_RESOLV_CONF = "/run/systemd/resolve/resolv.conf"
KUBELET_ENV_FILE_VARIABLE = "KUBELET_KUBEADM_ARGS"
BOOTSTRAP_TOKEN_TTL = "0s"
SHUTDOWN_GRACE_PERIOD = "120s"
SHUTDOWN_GRACE_PERIOD_CRITICAL_PODS = "60s"

# No-proxy suffixes for in-cluster service names
K8S_NO_PROXY = ".svc,.svc.cluster,.svc.cluster.local"

# Pause image tag per Kubernetes minor release
PAUSE_VERSIONS = {
    "v1.25": "3.8",
    "v1.26": "3.9",
    "v1.27": "3.9",
    "v1.28": "3.9",
    "v1.29": "3.9",
    "v1.30": "3.9",
}
