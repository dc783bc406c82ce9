"""Test QR code generation."""
from aktivlogg.services.qr_service import SUFFIX_ALPHABET, QRService

def test_generated_code_shape():
    code = QRService.generate_location_code('svpk', 'Utendørs 25m')

    prefix, suffix = code.rsplit('-', 1)
    assert prefix == 'svpk-utendors-25m'
    assert len(suffix) == 6
    assert all(ch in SUFFIX_ALPHABET for ch in suffix)

def test_generated_codes_differ():
    codes = {QRService.generate_location_code('svpk', 'Bane') for _ in range(20)}
    assert len(codes) > 1

def test_scanner_link_escapes_code():
    link = QRService.build_scanner_link('https://app.example/', 'bane 1&2')
    assert link == 'https://app.example/scanner?c=bane+1%262'

def test_qr_image_is_png_data_url():
    assert QRService.generate_qr_image('https://app.example/scanner?c=x').startswith(
        'data:image/png;base64,'
    )
