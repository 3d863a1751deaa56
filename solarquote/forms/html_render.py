"""
DocumentLayout → HTML.

Screen and print share one template; print mode only appends the script that
opens the browser's print dialog once the page (and its images) have loaded.
"""

from jinja2 import Environment, select_autoescape

from .layout import DocumentLayout

PRINT_SCRIPT = "<script>window.addEventListener('load',function(){window.print();});</script>"

DOCUMENT_CSS = """
@page{size:A4 portrait;margin:0}
*{margin:0;padding:0;box-sizing:border-box}
body{font-family:'Helvetica Neue',Helvetica,Arial,sans-serif;background:#e5e7eb;color:#111}
.pdf-container{display:flex;flex-direction:column;align-items:center;gap:16px;padding:16px 0}
.a4-page{position:relative;width:210mm;height:297mm;overflow:hidden;background:#fff;padding:14mm 14mm 10mm;display:flex;flex-direction:column;box-shadow:0 2px 10px rgba(0,0,0,.15)}
.page-body{flex:1;display:flex;flex-direction:column;gap:10px;padding-top:6mm}
.logo{position:absolute;top:4mm;left:5mm;height:12mm;width:auto;object-fit:contain}
.lh{display:flex;justify-content:space-between;border-bottom:2px solid #000;padding-bottom:10px}
.lh h1{font-size:14pt;font-weight:900;text-transform:uppercase;letter-spacing:-.5px}
.lh .tag{font-size:7.5pt;color:#dc2626;font-weight:800;letter-spacing:.2em;margin:2px 0 6px}
.lbl{font-size:5.5pt;font-weight:800;text-transform:uppercase;letter-spacing:.2em;color:#000;display:block}
.lh .office{font-size:7pt;color:#6b7280;font-weight:700;text-transform:uppercase}
.lh .right{text-align:right;font-size:7pt;color:#6b7280;line-height:1.5}
.lh .right .web{color:#000;font-weight:800;font-size:8pt;text-transform:uppercase}
.cust{display:flex;justify-content:space-between;align-items:flex-end}
.cust .name{font-size:14pt;font-weight:900;text-transform:uppercase}
.cust .qno{background:#000;color:#fff;font-size:7pt;font-weight:800;padding:2px 8px;border-radius:4px;text-transform:uppercase}
.cust .qid{font-size:14pt;font-weight:900;color:#dc2626;margin-top:4px}
.cust .qdate{font-size:8pt;color:#9ca3af;font-weight:700;text-transform:uppercase}
.details{background:#f9fafb;border:1px solid #f3f4f6;border-radius:10px;padding:8px 12px;display:flex;flex-wrap:wrap;gap:4px 24px;font-size:8pt;font-weight:700}
.details span.k{font-size:6.5pt;opacity:.4;text-transform:uppercase;letter-spacing:.1em;margin-right:4px}
.banner{background:#fef2f2;border-left:4px solid #dc2626;padding:8px 12px}
.banner .lbl{color:#f87171}
.banner p{font-size:11pt;font-weight:900;color:#b91c1c;text-transform:uppercase}
.hd{border-bottom:2px solid #000;padding-bottom:2px;font-size:9.5pt;font-weight:900;text-transform:uppercase;letter-spacing:.25em}
.hd.accent{color:#dc2626;border-color:#dc2626}
table.doc{width:100%;border-collapse:collapse;table-layout:fixed;font-size:9.5pt}
table.doc th{background:#000;color:#fff;padding:6px 8px;font-size:8pt;text-transform:uppercase;letter-spacing:.05em}
table.doc td{padding:8px;border-bottom:1px solid #f3f4f6;vertical-align:top;word-wrap:break-word}
table.doc.compact td,table.doc.compact th{padding:4px 8px;font-size:8.5pt}
table.doc tr.accent td{background:#fef2f2;color:#b91c1c}
.a-l{text-align:left}.a-c{text-align:center}.a-r{text-align:right}
.hl{display:flex;justify-content:space-between;align-items:center;background:#000;color:#fff;padding:12px 16px;border-radius:0 0 10px 10px}
.hl .t{font-size:9pt;font-weight:900;text-transform:uppercase}
.hl .n{font-size:6pt;color:#9ca3af;text-transform:uppercase;margin-top:3px}
.hl .amt{font-size:22pt;font-weight:900}
.cards{display:grid;grid-template-columns:repeat(4,1fr);gap:8px}
.cards div{background:#f9fafb;border:1px solid #f3f4f6;border-radius:10px;padding:8px;text-align:center}
.cards b{display:block;font-size:6pt;color:#dc2626;text-transform:uppercase;letter-spacing:.1em}
.cards span{font-size:7pt;font-weight:800}
ol.terms{list-style:none;display:flex;flex-direction:column;gap:6px;padding:0 12px}
ol.terms li{display:flex;gap:12px;font-size:9pt}
ol.terms li b{flex-shrink:0}
.motto{margin-top:auto;text-align:center;opacity:.4}
.motto .wm{font-size:60pt;font-weight:900;opacity:.1}
.motto p{font-size:7pt;color:#9ca3af;font-weight:700;text-transform:uppercase;letter-spacing:.2em;border-top:1px solid #e5e7eb;padding-top:8px}
.cols{display:grid;gap:14px}
.bank{border-top:4px solid #dc2626;padding:10px;font-size:9.5pt;font-weight:700}
.bank h4,.road h4{font-size:7pt;text-transform:uppercase;letter-spacing:.25em;color:#dc2626;text-align:center;margin-bottom:8px}
.bank .row{display:flex;justify-content:space-between;border-bottom:1px solid #f9fafb;padding:2px 0}
.bank .row span:first-child{color:#9ca3af;font-size:7.5pt;text-transform:uppercase}
.bank .upi{text-align:center;margin-top:6px;font-size:11pt;font-weight:900}
.road{background:#000;color:#fff;padding:12px;border-radius:10px}
.road .step{display:flex;gap:12px;margin-bottom:14px}
.road .step .s{font-size:22pt;font-weight:900;color:#374151}
.road .step p{font-size:8pt;color:#9ca3af}
.road .step b{font-size:10.5pt;text-transform:uppercase}
.check{background:#f9fafb;border:1px solid #f3f4f6;border-radius:18px;padding:14px 20px}
.check h4{font-size:10pt;color:#dc2626;text-align:center;letter-spacing:.3em;margin-bottom:10px}
.check .grid{display:grid;grid-template-columns:1fr 1fr;gap:4px 24px;font-size:9pt;font-weight:700}
.check .grid p:before{content:'\\2022';color:#ef4444;margin-right:8px}
.check ul{padding-left:16px;font-size:7.5pt;color:#6b7280;margin-top:4px}
.sign{margin-top:auto;display:flex;justify-content:space-between;padding:0 24px}
.sign div.box{width:60mm;text-align:center}
.sign .space{height:24mm;display:flex;align-items:flex-end;justify-content:center}
.sign .space img{height:22mm;width:auto}
.sign .ph{font-size:7pt;color:#fecaca;text-transform:uppercase;font-weight:800}
.sign .t{font-size:10.5pt;font-weight:900;text-transform:uppercase;border-top:2px solid #000;padding-top:4px}
.sign .t.co{color:#dc2626;border-color:#dc2626}
.sign .c{font-size:7.5pt;color:#9ca3af;text-transform:uppercase;margin-top:4px}
.footer{margin-top:8px;padding-top:8px;border-top:1px solid #f3f4f6;display:flex;justify-content:space-between;font-size:7pt;color:#9ca3af;font-weight:700;text-transform:uppercase;letter-spacing:.3em}
@media print{body{background:#fff}.pdf-container{padding:0;gap:0}.a4-page{box-shadow:none;page-break-after:always}}
"""

DOCUMENT_TEMPLATE = """{% macro block(b) -%}
{% if b.kind == 'letterhead' %}
<div class="lh">
 <div>
  <h1>{{ b.name }}</h1><p class="tag">{{ b.tagline }}</p>
  <div class="office"><span class="lbl">{{ b.office_label }}</span>{{ b.office }}</div>
  {% if b.gstin %}<div class="office">GSTIN: {{ b.gstin }}</div>{% endif %}
 </div>
 <div class="right">
  <p class="web">{{ b.contact[0] }}</p>{% for c in b.contact[1:] %}<p>{{ c }}</p>{% endfor %}
  <span class="lbl" style="margin-top:6px">{{ b.branches_label }}</span>
  {% for br in b.branches %}<p>{{ br }}</p>{% endfor %}
 </div>
</div>
{% elif b.kind == 'customer' %}
<div class="cust">
 <div><span class="lbl" style="color:#9ca3af">Customer Details</span><p class="name">{{ b.name }}</p></div>
 <div style="text-align:right"><span class="qno">{{ b.quote_label }}</span>
  <p class="qid">{{ b.quote_id }}</p><p class="qdate">{{ b.quote_date }}</p></div>
</div>
<div class="details">{% for k, v in b.details %}<div><span class="k">{{ k }}:</span>{{ v }}</div>{% endfor %}</div>
{% elif b.kind == 'banner' %}
<div class="banner"><span class="lbl">{{ b.label }}</span><p>{{ b.text }}</p></div>
{% elif b.kind == 'heading' %}
<h3 class="hd{% if b.accent %} accent{% endif %}">{{ b.text }}</h3>
{% elif b.kind == 'table' %}
<table class="doc{% if b.compact %} compact{% endif %}">
 <colgroup>{% for w in b.widths %}<col style="width:{{ '%.1f'|format(w * 100) }}%">{% endfor %}</colgroup>
 <thead><tr>{% for c in b.columns %}<th class="a-{{ b.align[loop.index0] }}">{{ c }}</th>{% endfor %}</tr></thead>
 <tbody>{% for row in b.rows %}{% set ri = loop.index0 %}
  <tr{% if ri in b.accent_rows %} class="accent"{% endif %}>{% for cell in row %}<td class="a-{{ b.align[loop.index0] }}">{{ cell }}</td>{% endfor %}</tr>
 {% endfor %}</tbody>
</table>
{% elif b.kind == 'highlight' %}
<div class="hl"><div><p class="t">{{ b.title }}</p>{% for n in b.notes %}<p class="n">{{ n }}</p>{% endfor %}</div>
 <div class="amt">{{ b.amount }}</div></div>
{% elif b.kind == 'cards' %}
<div class="cards">{% for label, text in b.items %}<div><b>{{ label }}</b><span>{{ text }}</span></div>{% endfor %}</div>
{% elif b.kind == 'numbered' %}
<ol class="terms">{% for marker, text in b.items %}<li><b>{{ marker }}</b><span>{{ text }}</span></li>{% endfor %}</ol>
{% elif b.kind == 'motto' %}
<div class="motto"><div class="wm">{{ b.watermark }}</div><p>{{ b.text }}</p></div>
{% elif b.kind == 'columns' %}
<div class="cols" style="grid-template-columns:{{ "%.2f"|format(b.split) }}fr {{ "%.2f"|format(1 - b.split) }}fr">{{ block(b.left) }}{{ block(b.right) }}</div>
{% elif b.kind == 'bank' %}
<div class="bank"><h4>{{ b.title }}</h4>
 {% for k, v in b.rows %}<div class="row"><span>{{ k }}</span><span>{{ v }}</span></div>{% endfor %}
 <div class="upi"><span class="lbl" style="color:#9ca3af">{{ b.upi_label }}</span>{{ b.upi }}</div></div>
{% elif b.kind == 'roadmap' %}
<div class="road"><h4>{{ b.title }}</h4>
 {% for s, t, d in b.steps %}<div class="step"><span class="s">{{ s }}</span><div><b>{{ t }}</b><p>{{ d }}</p></div></div>{% endfor %}
</div>
{% elif b.kind == 'checklist' %}
<div class="check"><h4>{{ b.title }}</h4>
 <div class="grid">{% for item in b.items %}<p>{{ item }}</p>{% endfor %}</div>
 <p style="font-size:8pt;font-weight:800;margin-top:10px">{{ b.note_title }}</p>
 <ul>{% for n in b.notes %}<li>{{ n }}</li>{% endfor %}</ul></div>
{% elif b.kind == 'signatures' %}
<div class="sign">
 <div class="box"><div class="space"></div><p class="t">{{ b.customer_title }}</p><p class="c">{{ b.customer_caption }}</p></div>
 <div class="box"><div class="space">{% if b.seal %}<img src="{{ b.seal }}" alt="Seal">{% else %}<span class="ph">{{ b.seal_placeholder }}</span>{% endif %}</div>
  <p class="t co">{{ b.company_title }}</p><p class="c">{{ b.company_caption }}</p></div>
</div>
{% endif %}
{%- endmacro %}<!DOCTYPE html><html><head><meta charset="utf-8">
<title>{{ layout.title }}</title>
<style>{{ css|safe }}</style></head><body>
<div class="pdf-container">
{% for page in layout.pages %}
<div class="a4-page" data-page="{{ page.number }}">
 {% if page.logo %}<img class="logo" src="{{ page.logo }}" alt="Logo">{% endif %}
 <div class="page-body">
 {% for b in page.blocks %}{{ block(b) }}{% endfor %}
 </div>
 <div class="footer"><span>{{ page.footer_ref }}</span><span>{{ page.footer_page }}</span></div>
</div>
{% endfor %}
</div>
{% if print_mode %}{{ print_script|safe }}{% endif %}
</body></html>"""


_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))
_template = _env.from_string(DOCUMENT_TEMPLATE)


def render_html(layout: DocumentLayout, print_mode: bool = False) -> str:
    return _template.render(layout=layout, css=DOCUMENT_CSS, print_mode=print_mode,
                            print_script=PRINT_SCRIPT)
