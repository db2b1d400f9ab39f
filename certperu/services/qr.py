import io

import qrcode

def qr_png(text: str, box_size: int = 10, border: int = 1) -> bytes:
    """PNG del QR que apunta a la URL de verificación."""
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=box_size, border=border)
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
