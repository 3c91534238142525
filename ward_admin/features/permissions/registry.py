"""
Static registry of application modules.

Order matters: it is the display order of the permission grid, and ``level``
is the nesting depth used to indent child modules under their parent.
"""
from typing import NamedTuple, Optional


class ModuleDef(NamedTuple):
    key: str
    label: str
    level: int


MODULES: tuple[ModuleDef, ...] = (
    ModuleDef("dashboard", "Tổng quan", 0),
    ModuleDef("personnel", "Quản lý Nhân sự", 0),
    ModuleDef("p-dashboard", "Dashboard Nhân sự", 1),
    ModuleDef("p-list", "Danh sách nhân viên", 1),
    ModuleDef("p-salary", "Lên lương", 1),
    ModuleDef("p-family", "Quan hệ gia đình", 1),
    ModuleDef("p-training", "Quá trình đào tạo", 1),
    ModuleDef("p-work", "Quá trình công tác", 1),
    ModuleDef("p-cert", "Chứng chỉ hành nghề", 1),
    ModuleDef("p-insurance", "Bảo hiểm y tế", 1),
    ModuleDef("leave", "Quản lý phép/Tranh thủ", 0),
    ModuleDef("cong-van", "Quản lý công văn", 0),
    ModuleDef("research", "Nghiên cứu khoa học", 0),
    ModuleDef("r-topics", "Đề tài NCKH", 1),
    ModuleDef("r-articles", "Bài báo", 1),
    ModuleDef("r-sports", "Hội thao kỹ thuật", 1),
    ModuleDef("r-conference", "Tham dự báo cáo", 1),
    ModuleDef("rewards", "Khen thưởng - Kỷ luật", 0),
    ModuleDef("party-management", "Quản lý đảng viên", 0),
    ModuleDef("patient-card-management", "Quản lý thẻ chăm", 0),
    ModuleDef("absence", "Quản lý Quân số nghỉ", 0),
    ModuleDef("reports", "Báo cáo thống kê", 0),
    ModuleDef("combat", "Sẵn sàng chiến đấu", 0),
    ModuleDef("duty", "Lịch trực", 0),
    ModuleDef("schedule", "Lịch công tác", 0),
    ModuleDef("assets", "Quản lý tài sản", 0),
    ModuleDef("a-medical-equip", "Thiết bị y tế", 1),
    ModuleDef("a-it-equip", "Thiết bị CNTT", 1),
    ModuleDef("a-medical-tools", "Dụng cụ y tế", 1),
    ModuleDef("a-uniforms", "Quân trang, đồ vải", 1),
    ModuleDef("settings", "Cài đặt hệ thống", 0),
)

# Roles whose rows appear in the permission grid; admin always has full access
EDITABLE_ROLES: tuple[str, ...] = ("manager", "user")

# Viewing the dashboard cannot be switched off from the grid
LOCKED_VIEW_MODULES = frozenset({"dashboard"})

_BY_KEY = {module.key: module for module in MODULES}


def get_module(key: str) -> Optional[ModuleDef]:
    return _BY_KEY.get(key)
