"""Initial dashboard contents loaded when a session starts."""

from datetime import date
from typing import Any, Dict, List, Tuple
from pantau_shared.constants import (
    TASK_COLUMN_NEW,
    TASK_COLUMN_IN_PROGRESS,
    TASK_COLUMN_DONE
)
from pantau_shared.models import Task


def initial_notification_payloads() -> List[Dict[str, Any]]:
    """Dashboard alerts at session start, oldest first."""
    return [
        {
            "priority": "Sedang",
            "title": "Jadwal Pemeliharaan Alat",
            "time": "3 jam yang lalu",
            "description": "Pengingat: Jadwal pemeliharaan X-Ray portable hari ini",
            "location": "RS Lanud Halim",
            "actionLabel": "Jadwalkan teknisi"
        },
        {
            "priority": "Rendah",
            "title": "Pengiriman Alkes Tiba",
            "time": "1 jam yang lalu",
            "description": "Pengiriman alat kesehatan dari Depot Pusat telah tiba",
            "location": "RS Lanud Adisutjipto",
            "actionLabel": "Konfirmasi penerimaan"
        },
        {
            "priority": "Sedang",
            "title": "Ruang ICU Hampir Penuh",
            "time": "45 menit yang lalu",
            "description": "Kapasitas ruang ICU tersisa 2 dari 10 tempat tidur",
            "location": "RS Lanud Halim",
            "actionLabel": "Alihkan pasien prioritas"
        },
        {
            "priority": "Tinggi",
            "title": "Kebutuhan Darah Segera",
            "time": "15 menit yang lalu",
            "description": "Kebutuhan darah golongan O- untuk kasus operasi darurat",
            "location": "RSPAU Hardjolukito",
            "actionLabel": "Aktifkan kode donor"
        }
    ]


def initial_task_columns() -> Dict[str, Tuple[Task, ...]]:
    """Task board at session start."""
    return {
        TASK_COLUMN_NEW: (
            Task(id="T1", title="Siapkan laporan stok bulanan",
                 description="Kompilasi data dari semua RS",
                 assignee="Staf Logistik", due_date=date(2025, 5, 30)),
            Task(id="T2", title="Jadwalkan pemeliharaan X-Ray",
                 description="Hubungi vendor teknis",
                 assignee="Tim Alkes", due_date=date(2025, 6, 2)),
        ),
        TASK_COLUMN_IN_PROGRESS: (
            Task(id="T3", title="Verifikasi data pasien",
                 description="Cross-check data baru dari RSPAU",
                 assignee="Admin Medis", due_date=date(2025, 5, 28)),
        ),
        TASK_COLUMN_DONE: (
            Task(id="T4", title="Pesan ulang reagen lab",
                 description="Pesanan untuk kebutuhan bulan Juni",
                 assignee="Lab Pusat", due_date=date(2025, 5, 25)),
        ),
    }
