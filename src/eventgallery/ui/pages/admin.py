"""Admin page: event settings, photo upload and photo management."""

import streamlit as st
import structlog

from eventgallery.errors import DecodeError
from eventgallery.services.ingest import ingest_files
from eventgallery.services.transcoder import BatchResult, get_transcoder
from eventgallery.ui.components import format_captured_at, render_empty_state, render_header
from eventgallery.ui.state import get_photo_store, get_settings_store

logger = structlog.get_logger(__name__)

UPLOAD_TYPES = ["jpg", "jpeg", "png", "webp", "gif", "bmp", "heic", "heif"]

MANAGE_COLUMNS = 4


def render_batch_result(result: BatchResult) -> None:
    """Report how a batch went."""
    if result.is_complete_failure:
        st.error("画像を処理できませんでした。ファイル形式を確認してください。")
    elif result.is_partial:
        st.warning(f"{result.success_count} 枚を追加しました。{result.failure_count} 枚は処理できませんでした。")
    elif result.success_count:
        st.success(f"{result.success_count} 枚の写真を追加しました。")

    for failure in result.failures:
        st.caption(f"❌ {failure.filename}: {failure.message}")


def render_settings_section() -> None:
    settings_store = get_settings_store()
    settings = settings_store.get()

    st.markdown("### ⚙️ イベント設定")

    title = st.text_input("タイトル", value=settings.title)
    if title != settings.title:
        settings_store.update(title=title)

    banner_file = st.file_uploader("バナー画像", type=UPLOAD_TYPES, key="banner_upload")
    if banner_file is not None and st.button("バナーを更新", key="update_banner"):
        try:
            banner_payload = get_transcoder().encode_banner(banner_file.getvalue(), banner_file.name)
        except DecodeError as e:
            st.error(e.user_message)
        else:
            settings_store.update(banner_payload=banner_payload)
            st.rerun()

    if st.button("既定の設定に戻す", key="reset_settings"):
        settings_store.reset()
        st.rerun()


def render_upload_section() -> None:
    photo_store = get_photo_store()

    st.markdown("### 📤 写真をアップロード")

    with st.form("photo_upload_form", clear_on_submit=True):
        uploaded_files = st.file_uploader("写真を選択", type=UPLOAD_TYPES, accept_multiple_files=True)
        submitted = st.form_submit_button("アップロード", type="primary")

    if submitted and uploaded_files:
        with st.spinner("処理中..."):
            result = ingest_files([(f.name, f.getvalue()) for f in uploaded_files], photo_store)
        render_batch_result(result)

    camera_photo = st.camera_input("即時撮影")
    if camera_photo is not None and st.button("撮影した写真を追加", key="add_camera_photo"):
        result = ingest_files([(camera_photo.name, camera_photo.getvalue())], photo_store)
        render_batch_result(result)


def render_manage_section() -> None:
    photo_store = get_photo_store()
    photos = photo_store.list()

    st.markdown(f"### 🗂️ 写真の管理 ({len(photos)})")
    st.caption("新しい写真が先頭に表示されます")

    if not photos:
        render_empty_state("まだ写真がありません", "写真をアップロードして始めましょう。", icon="📷")
        return

    confirm_clear = st.checkbox("すべての写真を削除することを確認しました", key="confirm_clear")
    if st.button("🗑️ すべて削除", key="clear_photos", disabled=not confirm_clear):
        photo_store.clear()
        logger.info("photos_cleared_from_admin", photo_count=len(photos))
        st.rerun()

    for start in range(0, len(photos), MANAGE_COLUMNS):
        cols = st.columns(MANAGE_COLUMNS)
        for col, photo in zip(cols, photos[start : start + MANAGE_COLUMNS]):
            with col:
                st.image(photo.payload_bytes(), use_container_width=True)
                st.caption(f"{photo.source_name} · {format_captured_at(photo.captured_at)}")
                if st.button("🗑️ 削除", key=f"delete_{photo.id}"):
                    photo_store.delete_photo(photo.id)
                    logger.info("photo_deleted_from_admin", photo_id=photo.id)
                    st.rerun()


def render_admin_page() -> None:
    """Render the admin page."""
    render_header(get_settings_store().get())
    render_settings_section()
    st.divider()
    render_upload_section()
    st.divider()
    render_manage_section()
