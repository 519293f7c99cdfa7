from provider_kubeadm.domain.context import ClusterContext
from provider_kubeadm.stages.pre import get_pre_kubeadm_stages
from provider_kubeadm.stages.proxy import containerd_proxy_env, get_pre_kubeadm_proxy_stage, kubelet_proxy_env

PROXY_ENV = {
    "HTTP_PROXY": "http://p:8080",
    "HTTPS_PROXY": "https://p:8443",
    "NO_PROXY": "example.com",
}


def test_pre_stage_order():
    stages = get_pre_kubeadm_stages(ClusterContext(local_images_path="/opt/content/images"))
    assert [s.name for s in stages] == [
        "Set proxy env",
        "Run Pre Kubeadm Commands",
        "Run Pre Kubeadm Disable SwapOff",
        "Run Load Kube Images",
        "Run Import Local Images",
    ]


def test_pre_stage_commands_appliance():
    stages = get_pre_kubeadm_stages(ClusterContext(local_images_path="/opt/content/images"))

    assert stages[1].commands == ["/bin/bash /opt/kubeadm/scripts/kube-pre-init.sh /"]
    assert stages[2].commands == [
        "sed -i '/ swap / s/^\\(.*\\)$/#\\1/g' /etc/fstab",
        "swapoff -a",
    ]
    assert stages[3].commands == [
        "chmod +x /opt/kubeadm/scripts/import.sh",
        "/bin/sh /opt/kubeadm/scripts/import.sh /opt/kube-images / > /var/log/import-kube-images.log",
    ]


def test_import_local_images_requested():
    ctx = ClusterContext(
        root_path="/persistent/spectro",
        local_images_path="/persistent/spectro/opt/content/images",
        import_local_images=True,
    )
    stage = get_pre_kubeadm_stages(ctx)[4]

    assert stage.if_ == "[ -d /persistent/spectro/opt/content/images ]"
    assert stage.commands == [
        "chmod +x /persistent/spectro/opt/kubeadm/scripts/import.sh",
        "/bin/sh /persistent/spectro/opt/kubeadm/scripts/import.sh "
        "/persistent/spectro/opt/content/images > /var/log/import.log",
    ]


def test_import_local_images_not_requested():
    stage = get_pre_kubeadm_stages(ClusterContext(local_images_path="/opt/content/images"))[4]
    assert stage.if_ == "[ -d /opt/content/images ]"
    assert stage.commands is None


def test_paths_with_spaces_are_quoted():
    ctx = ClusterContext(local_images_path="/data/my images", import_local_images=True)
    stage = get_pre_kubeadm_stages(ctx)[4]
    assert stage.if_ == "[ -d '/data/my images' ]"
    assert stage.commands[1].endswith("'/data/my images' > /var/log/import.log")


def test_proxy_stage_without_proxy():
    stage = get_pre_kubeadm_proxy_stage(ClusterContext())

    assert [(f.path, f.permissions, f.content) for f in stage.files] == [
        ("/etc/default/kubelet", 0o400, ""),
        ("/run/systemd/system/containerd.service.d/http-proxy.conf", 0o400, ""),
    ]


def test_kubelet_proxy_env():
    ctx = ClusterContext(env_config=PROXY_ENV, cluster_cidr="192.168.0.0/16", service_cidr="10.96.0.0/12")
    assert kubelet_proxy_env(ctx).splitlines() == [
        "HTTP_PROXY=http://p:8080",
        "HTTPS_PROXY=https://p:8443",
        "NO_PROXY=192.168.0.0/16,10.96.0.0/12,.svc,.svc.cluster,.svc.cluster.local,example.com",
    ]


def test_kubelet_proxy_env_reads_https_from_https_key():
    ctx = ClusterContext(env_config={"HTTPS_PROXY": "https://secure:8443"})
    lines = kubelet_proxy_env(ctx).splitlines()
    assert "HTTPS_PROXY=https://secure:8443" in lines
    assert not any(line.startswith("HTTP_PROXY=") for line in lines)


def test_no_proxy_alone_writes_nothing():
    ctx = ClusterContext(env_config={"NO_PROXY": "example.com"})
    assert kubelet_proxy_env(ctx) == ""
    assert containerd_proxy_env(ctx) == ""


def test_containerd_proxy_drop_in():
    ctx = ClusterContext(env_config={"HTTP_PROXY": "http://p:8080"})
    assert containerd_proxy_env(ctx).splitlines() == [
        "[Service]",
        'Environment="HTTP_PROXY=http://p:8080"',
        'Environment="NO_PROXY=.svc,.svc.cluster,.svc.cluster.local"',
    ]


def test_vendor_runtime_drop_in_path():
    ctx = ClusterContext(containerd_service_folder_name="spectro-containerd")
    stage = get_pre_kubeadm_proxy_stage(ctx)
    assert stage.files[1].path == "/run/systemd/system/spectro-containerd.service.d/http-proxy.conf"


def test_kube_images_import_is_rooted_and_logged():
    ctx = ClusterContext(
        root_path="/persistent/spectro",
        local_images_path="/persistent/spectro/opt/content/images",
    )
    stage = get_pre_kubeadm_stages(ctx)[3]
    assert stage.commands[1] == (
        "/bin/sh /persistent/spectro/opt/kubeadm/scripts/import.sh "
        "/persistent/spectro/opt/kube-images /persistent/spectro > /var/log/import-kube-images.log"
    )
